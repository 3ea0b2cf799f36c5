"""Invoice read side."""

from typing import List, Optional
from uuid import UUID

from django.db.models import Q

from apps.accounts.models import User
from apps.invoices.models import Invoice, InvoiceEditHistory

from .exceptions import InvoiceNotFoundError, InvoiceAccessDeniedError

_RELATED = ('user', 'company', 'advance', 'budget_request', 'current_reviewer', 'reviewed_by')


def list_own_invoices(*, user: User, status: Optional[str] = None) -> List[Invoice]:
    invoices = Invoice.objects.filter(user=user).select_related('company')
    if status:
        invoices = invoices.filter(status=status)
    return list(invoices)


def list_invoices(
    *,
    status: Optional[str] = None,
    company_id: Optional[UUID] = None,
    user_id: Optional[UUID] = None,
    search: str = '',
    limit: int = 50,
    offset: int = 0,
) -> List[Invoice]:
    """Reviewer listing, newest first."""
    invoices = Invoice.objects.select_related(*_RELATED)
    if status:
        invoices = invoices.filter(status=status)
    if company_id:
        invoices = invoices.filter(company_id=company_id)
    if user_id:
        invoices = invoices.filter(user_id=user_id)
    if search:
        invoices = invoices.filter(
            Q(invoice_number__icontains=search)
            | Q(ksef_number__icontains=search)
            | Q(user__email__icontains=search)
            | Q(user__name__icontains=search)
        )
    return list(invoices[offset:offset + limit])


def get_invoice_detail(*, invoice_id: UUID, viewer: User) -> Invoice:
    """
    Raises:
        InvoiceNotFoundError: invoice doesn't exist
        InvoiceAccessDeniedError: regular user viewing someone else's invoice
    """
    try:
        invoice = Invoice.objects.select_related(*_RELATED).get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")

    if not viewer.is_accountant and invoice.user_id != viewer.id:
        raise InvoiceAccessDeniedError()
    return invoice


def get_invoice_edit_history(*, invoice_id: UUID, viewer: User) -> List[InvoiceEditHistory]:
    """Corrections of an invoice, newest first. Same access rule as the detail."""
    invoice = get_invoice_detail(invoice_id=invoice_id, viewer=viewer)
    return list(invoice.edit_history.select_related('edited_by'))
