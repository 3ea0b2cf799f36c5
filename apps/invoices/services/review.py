"""
Invoice review service.

Every transition is a conditional update on the expected status; an update
that matches no row means another reviewer got there first.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import User
from apps.core.money import expenses_setting, require_text
from apps.invoices.models import Invoice, InvoiceStatus
from apps.notifications.services import send_safely, notify_invoice_reviewed

from .exceptions import (
    InvoiceNotFoundError,
    InvoiceValidationError,
    InvoiceStateConflictError,
    InvoiceClaimedError,
)

logger = logging.getLogger(__name__)

REVIEW_OUTCOMES = (InvoiceStatus.ACCEPTED, InvoiceStatus.REJECTED)


def _raise_for_failed_transition(invoice_id: UUID, reviewer: Optional[User] = None):
    """Explain why a guarded update matched no row."""
    invoice = Invoice.objects.filter(id=invoice_id).first()
    if invoice is None:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")
    if (
        reviewer is not None
        and invoice.status == InvoiceStatus.IN_REVIEW
        and invoice.current_reviewer_id != reviewer.id
    ):
        raise InvoiceClaimedError()
    logger.warning("Invoice %s transition rejected, current status %s", invoice_id, invoice.status)
    raise InvoiceStateConflictError()


def _stale_claim_threshold():
    return timezone.now() - timedelta(seconds=expenses_setting('REVIEW_STALE_SECONDS'))


def claim_for_review(*, invoice_id: UUID, reviewer: User) -> Invoice:
    """
    Move a pending invoice to in_review and assign it to ``reviewer``.

    An in_review invoice whose reviewer stopped sending heartbeats for
    longer than REVIEW_STALE_SECONDS may be taken over.
    """
    now = timezone.now()
    threshold = _stale_claim_threshold()
    abandoned = Q(status=InvoiceStatus.IN_REVIEW) & (
        Q(last_review_ping__lt=threshold)
        | Q(last_review_ping__isnull=True, review_started_at__lt=threshold)
    )
    updated = Invoice.objects.filter(
        Q(status=InvoiceStatus.PENDING) | abandoned,
        id=invoice_id,
    ).update(
        status=InvoiceStatus.IN_REVIEW,
        current_reviewer=reviewer,
        review_started_at=now,
        last_review_ping=now,
        updated_at=now,
    )
    if not updated:
        invoice = Invoice.objects.filter(id=invoice_id).first()
        if (
            invoice is not None
            and invoice.status == InvoiceStatus.IN_REVIEW
            and invoice.current_reviewer_id == reviewer.id
        ):
            return invoice
        _raise_for_failed_transition(invoice_id, reviewer)

    logger.info("Invoice %s claimed by %s", invoice_id, reviewer.id)
    return Invoice.objects.get(id=invoice_id)


def review_heartbeat(*, invoice_id: UUID, reviewer: User) -> Invoice:
    """Keep the claim of ``reviewer`` on an in_review invoice alive."""
    updated = Invoice.objects.filter(
        id=invoice_id,
        status=InvoiceStatus.IN_REVIEW,
        current_reviewer=reviewer,
    ).update(last_review_ping=timezone.now())
    if not updated:
        _raise_for_failed_transition(invoice_id, reviewer)
    return Invoice.objects.get(id=invoice_id)


def release_review(*, invoice_id: UUID, reviewer: User) -> Invoice:
    """Hand an in_review invoice back to the pending queue."""
    updated = Invoice.objects.filter(
        id=invoice_id,
        status=InvoiceStatus.IN_REVIEW,
        current_reviewer=reviewer,
    ).update(
        status=InvoiceStatus.PENDING,
        current_reviewer=None,
        review_started_at=None,
        last_review_ping=None,
        updated_at=timezone.now(),
    )
    if not updated:
        _raise_for_failed_transition(invoice_id, reviewer)

    logger.info("Invoice %s released by %s", invoice_id, reviewer.id)
    return Invoice.objects.get(id=invoice_id)


@transaction.atomic
def finalize_review(
    *,
    invoice_id: UUID,
    reviewer: User,
    status: str,
    rejection_reason: Optional[str] = None,
) -> Invoice:
    """
    Accept or reject an invoice held by ``reviewer``.

    Raises:
        InvoiceValidationError: unknown outcome or rejection reason too short
        InvoiceNotFoundError: invoice doesn't exist
        InvoiceClaimedError: another reviewer holds the invoice
        InvoiceStateConflictError: invoice is not in review
    """
    if status not in REVIEW_OUTCOMES:
        raise InvoiceValidationError("Status must be 'accepted' or 'rejected'")

    reason = ''
    if status == InvoiceStatus.REJECTED:
        reason = require_text(
            rejection_reason,
            field='Rejection reason',
            min_length=expenses_setting('REJECTION_REASON_MIN_LENGTH'),
        )

    now = timezone.now()
    updated = Invoice.objects.filter(
        id=invoice_id,
        status=InvoiceStatus.IN_REVIEW,
        current_reviewer=reviewer,
    ).update(
        status=status,
        rejection_reason=reason,
        reviewed_by=reviewer,
        reviewed_at=now,
        current_reviewer=None,
        review_started_at=None,
        last_review_ping=None,
        updated_at=now,
    )
    if not updated:
        _raise_for_failed_transition(invoice_id, reviewer)

    invoice = Invoice.objects.get(id=invoice_id)
    logger.info("Invoice %s %s by %s", invoice.id, status, reviewer.id)
    send_safely(
        notify_invoice_reviewed,
        user_id=invoice.user_id,
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        status=status,
        reason=reason or None,
    )
    return invoice


def mark_transferred(*, invoice_id: UUID, actor: User) -> Invoice:
    """Record that an accepted invoice was paid out."""
    now = timezone.now()
    updated = Invoice.objects.filter(
        id=invoice_id,
        status=InvoiceStatus.ACCEPTED,
    ).update(
        status=InvoiceStatus.TRANSFERRED,
        transferred_by=actor,
        transferred_at=now,
        updated_at=now,
    )
    if not updated:
        _raise_for_failed_transition(invoice_id)

    logger.info("Invoice %s marked transferred by %s", invoice_id, actor.id)
    return Invoice.objects.get(id=invoice_id)
