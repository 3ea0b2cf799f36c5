"""Accountant edits and admin deletion of invoices."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import verify_password
from apps.core.money import require_text
from apps.invoices.models import (
    Invoice,
    InvoiceStatus,
    InvoiceEditHistory,
    InvoiceDeletionRequest,
    DeletionRequestStatus,
)
from apps.invoices.storage import discard_blobs_on_commit

from .balance_effects import refund_deleted_invoice
from .exceptions import InvoiceNotFoundError, SettledInvoiceError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('invoice_number', 'description', 'ksef_number')


@transaction.atomic
def update_invoice_data(
    *,
    invoice_id: UUID,
    editor: User,
    invoice_number: Optional[str] = None,
    description: Optional[str] = None,
    ksef_number: Optional[str] = None,
) -> Invoice:
    """
    Correct the descriptive data of an invoice.

    Every edit that changes something leaves an InvoiceEditHistory row with
    the previous and new values.

    Raises:
        InvoiceNotFoundError: invoice doesn't exist
        SettledInvoiceError: invoice is settled
    """
    requested = {}
    if invoice_number is not None:
        requested['invoice_number'] = require_text(
            invoice_number, field='Invoice number', min_length=1, max_length=255
        )
    if description is not None:
        requested['description'] = description.strip()
    if ksef_number is not None:
        requested['ksef_number'] = ksef_number.strip() or None

    try:
        invoice = Invoice.objects.select_for_update().get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")

    if not requested:
        return invoice
    if invoice.status == InvoiceStatus.SETTLED:
        raise SettledInvoiceError()

    changes = {
        field: value
        for field, value in requested.items()
        if getattr(invoice, field) != value
    }
    if not changes:
        return invoice

    history = InvoiceEditHistory(invoice=invoice, edited_by=editor)
    for field in EDITABLE_FIELDS:
        if field in changes:
            setattr(history, f'previous_{field}', getattr(invoice, field))
            setattr(history, f'new_{field}', changes[field])
    history.save()

    Invoice.objects.filter(id=invoice.id).update(updated_at=timezone.now(), **changes)
    logger.info("Invoice %s edited by %s (%s)", invoice_id, editor.id, ', '.join(changes))
    return Invoice.objects.get(id=invoice.id)


def remove_invoice(*, invoice: Invoice, actor: User, notes: str = '') -> None:
    """
    Refund and hard-delete an invoice inside the caller's transaction.

    Pending deletion requests for the invoice are closed as approved by
    ``actor``. The scan is removed after commit; a failure there is only
    logged.
    """
    now = timezone.now()
    InvoiceDeletionRequest.objects.filter(
        invoice_id=invoice.id,
        status=DeletionRequestStatus.PENDING,
    ).update(
        status=DeletionRequestStatus.APPROVED,
        reviewed_by=actor,
        reviewed_at=now,
        updated_at=now,
    )
    refund_deleted_invoice(invoice=invoice, actor=actor, notes=notes)
    image_key = invoice.image_key
    Invoice.objects.filter(id=invoice.id).delete()
    discard_blobs_on_commit([image_key])


def delete_invoice(*, invoice_id: UUID, admin: User, admin_password: str) -> None:
    """
    Direct deletion by an admin, bypassing the deletion-request workflow.

    Pending deletion requests for the invoice are closed as approved.

    Raises:
        InvalidPasswordError: password re-verification failed
        InvoiceNotFoundError: invoice doesn't exist
    """
    verify_password(user=admin, password=admin_password)

    with transaction.atomic():
        try:
            invoice = Invoice.objects.select_for_update().get(id=invoice_id)
        except Invoice.DoesNotExist:
            raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")
        remove_invoice(invoice=invoice, actor=admin)

    logger.info("Invoice %s deleted by admin %s", invoice_id, admin.id)
