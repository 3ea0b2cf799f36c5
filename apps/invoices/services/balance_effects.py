"""Ledger entries caused by invoices."""

from apps.ledger.models import TransactionType
from apps.ledger.services import apply_balance_change
from apps.invoices.models import Invoice, InvoiceType


def charge_new_invoice(*, invoice: Invoice, actor):
    """
    Book a freshly created invoice against its owner's balance.

    Regular invoices with an amount are deducted; corrections refund the
    corrected amount. Must run inside the transaction that inserted the row.
    """
    if invoice.invoice_type == InvoiceType.CORRECTION:
        if invoice.correction_amount:
            return apply_balance_change(
                user_id=invoice.user_id,
                amount=invoice.correction_amount,
                transaction_type=TransactionType.INVOICE_REFUND,
                reference_id=invoice.id,
                notes=f"Correction refund for invoice {invoice.invoice_number}",
                created_by=actor,
            )
        return None

    if invoice.amount and invoice.amount > 0:
        return apply_balance_change(
            user_id=invoice.user_id,
            amount=-invoice.amount,
            transaction_type=TransactionType.INVOICE_DEDUCTION,
            reference_id=invoice.id,
            notes=f"Deduction for invoice {invoice.invoice_number}",
            created_by=actor,
        )
    return None


def refund_deleted_invoice(*, invoice: Invoice, actor, notes: str = ''):
    """Give back the amount deducted when the invoice was created."""
    if not invoice.amount or invoice.amount <= 0:
        return None
    return apply_balance_change(
        user_id=invoice.user_id,
        amount=invoice.amount,
        transaction_type=TransactionType.INVOICE_DELETE_REFUND,
        reference_id=invoice.id,
        notes=notes or f"Refund for deleted invoice {invoice.invoice_number}",
        created_by=actor,
    )
