"""Invoice submission service."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.advances.models import Advance
from apps.budget_requests.models import BudgetRequest
from apps.companies.services import ensure_company_access
from apps.core.money import expenses_setting, require_text, to_amount
from apps.invoices.models import Invoice, InvoiceType
from apps.invoices.storage import save_blob, discard_blobs

from .balance_effects import charge_new_invoice
from .exceptions import InvoiceNotFoundError, InvoiceValidationError

logger = logging.getLogger(__name__)


def _validate_links(*, user: User, advance_id, budget_request_id) -> None:
    if advance_id and not Advance.objects.filter(id=advance_id, user_id=user.id).exists():
        raise InvoiceValidationError("The advance does not belong to this user")
    if budget_request_id and not BudgetRequest.objects.filter(
        id=budget_request_id, user_id=user.id
    ).exists():
        raise InvoiceValidationError("The budget request does not belong to this user")


def create_invoice(
    *,
    user: User,
    company_id: UUID,
    invoice_number: str,
    image_key: str,
    justification: str,
    amount: Optional[Decimal] = None,
    ksef_number: Optional[str] = None,
    invoice_type: str = InvoiceType.EINVOICE,
    original_invoice_id: Optional[UUID] = None,
    correction_amount: Optional[Decimal] = None,
    advance_id: Optional[UUID] = None,
    budget_request_id: Optional[UUID] = None,
    description: str = '',
) -> Invoice:
    """
    Register an invoice and book it against the owner's balance.

    Raises:
        CompanyNotFoundError / CompanyAccessDeniedError: company checks
        InvoiceValidationError: invalid input or foreign links
        InvoiceNotFoundError: correction references an unknown invoice
    """
    company = ensure_company_access(user=user, company_id=company_id)
    if not company.active:
        raise InvoiceValidationError("The selected company is inactive")

    invoice_number = require_text(invoice_number, field='Invoice number', min_length=1, max_length=255)
    justification = require_text(
        justification,
        field='Justification',
        min_length=expenses_setting('INVOICE_JUSTIFICATION_MIN_LENGTH'),
        max_length=expenses_setting('JUSTIFICATION_MAX_LENGTH'),
    )
    if not image_key:
        raise InvoiceValidationError("An invoice scan is required")
    if invoice_type not in InvoiceType.values:
        raise InvoiceValidationError(f"Unknown invoice type: {invoice_type}")

    original_invoice = None
    if invoice_type == InvoiceType.CORRECTION:
        if not original_invoice_id:
            raise InvoiceValidationError("A correction must reference the original invoice")
        if amount is not None:
            raise InvoiceValidationError("A correction carries a correction amount instead of an amount")
        original_invoice = Invoice.objects.filter(id=original_invoice_id, user_id=user.id).first()
        if original_invoice is None:
            raise InvoiceNotFoundError("Original invoice not found")
        correction_amount = to_amount(correction_amount)
    else:
        if original_invoice_id or correction_amount is not None:
            raise InvoiceValidationError("Only corrections reference an original invoice")
        if amount is not None:
            amount = to_amount(amount)

    _validate_links(user=user, advance_id=advance_id, budget_request_id=budget_request_id)

    with transaction.atomic():
        invoice = Invoice.objects.create(
            user=user,
            company=company,
            invoice_number=invoice_number,
            ksef_number=(ksef_number or '').strip() or None,
            image_key=image_key,
            amount=amount,
            invoice_type=invoice_type,
            original_invoice=original_invoice,
            correction_amount=correction_amount,
            advance_id=advance_id,
            budget_request_id=budget_request_id,
            description=(description or '').strip(),
            justification=justification,
        )
        charge_new_invoice(invoice=invoice, actor=user)

    logger.info("Invoice %s (%s) submitted by %s", invoice.id, invoice.invoice_type, user.id)
    return invoice


def upload_invoice(*, user: User, image, **fields) -> Invoice:
    """
    Store the scan, then create the invoice.

    The stored blob is removed again when the invoice cannot be created.
    """
    image_key = save_blob(user_id=user.id, uploaded_file=image)
    try:
        return create_invoice(user=user, image_key=image_key, **fields)
    except Exception:
        discard_blobs([image_key])
        raise
