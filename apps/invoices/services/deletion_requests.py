"""
Invoice deletion-request workflow.

A user asks for an invoice to be deleted; an admin confirms with their
password. Approval refunds the invoice, deletes it and closes the request in
one transaction, guarded by the request still being pending.
"""

import logging
from typing import List, Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import verify_password
from apps.core.exceptions import BadRequestError
from apps.core.money import expenses_setting, require_text
from apps.invoices.models import Invoice, InvoiceDeletionRequest, DeletionRequestStatus
from apps.notifications.services import (
    send_safely,
    notify_deletion_request_submitted,
    notify_deletion_request_reviewed,
)

from .exceptions import (
    InvoiceNotFoundError,
    InvoiceAccessDeniedError,
    DeletionRequestNotFoundError,
    DuplicateDeletionRequestError,
    DeletionRequestAlreadyReviewedError,
)
from .management import remove_invoice

logger = logging.getLogger(__name__)

REVIEW_ACTIONS = ('approve', 'reject')


def _get_deletion_request(request_id: UUID) -> InvoiceDeletionRequest:
    try:
        return InvoiceDeletionRequest.objects.get(id=request_id)
    except InvoiceDeletionRequest.DoesNotExist:
        raise DeletionRequestNotFoundError(f"Deletion request {request_id} not found")


def create_deletion_request(*, invoice_id: UUID, requester: User, reason: str) -> InvoiceDeletionRequest:
    """
    Ask for an invoice to be deleted.

    Raises:
        BadRequestError: reason out of bounds
        InvoiceNotFoundError: invoice doesn't exist
        InvoiceAccessDeniedError: regular user asking about someone else's invoice
        DuplicateDeletionRequestError: a request is already pending
    """
    reason = require_text(
        reason,
        field='Reason',
        min_length=expenses_setting('DELETION_REASON_MIN_LENGTH'),
        max_length=expenses_setting('DELETION_REASON_MAX_LENGTH'),
    )

    try:
        invoice = Invoice.objects.get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")

    if requester.is_regular_user and invoice.user_id != requester.id:
        raise InvoiceAccessDeniedError()

    if InvoiceDeletionRequest.objects.filter(
        invoice=invoice, status=DeletionRequestStatus.PENDING
    ).exists():
        raise DuplicateDeletionRequestError()

    try:
        with transaction.atomic():
            deletion_request = InvoiceDeletionRequest.objects.create(
                invoice=invoice,
                invoice_number=invoice.invoice_number,
                requested_by=requester,
                reason=reason,
            )
            send_safely(
                notify_deletion_request_submitted,
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                requester_name=requester.get_display_name(),
            )
    except IntegrityError:
        # Partial unique index on pending requests
        raise DuplicateDeletionRequestError()

    logger.info("Deletion of invoice %s requested by %s", invoice.id, requester.id)
    return deletion_request


def review_deletion_request(
    *,
    request_id: UUID,
    admin: User,
    action: str,
    admin_password: str,
    rejection_reason: Optional[str] = None,
) -> InvoiceDeletionRequest:
    """
    Approve or reject a pending deletion request.

    Raises:
        InvalidPasswordError: password re-verification failed
        BadRequestError: unknown action or rejection reason too short
        DeletionRequestNotFoundError: request doesn't exist
        DeletionRequestAlreadyReviewedError: request is no longer pending
        InvoiceNotFoundError: approving a request whose invoice is already gone
    """
    verify_password(user=admin, password=admin_password)

    if action not in REVIEW_ACTIONS:
        raise BadRequestError("Action must be 'approve' or 'reject'")

    deletion_request = _get_deletion_request(request_id)
    if deletion_request.status != DeletionRequestStatus.PENDING:
        raise DeletionRequestAlreadyReviewedError()

    if action == 'reject':
        return _reject(deletion_request, admin=admin, rejection_reason=rejection_reason)
    return _approve(deletion_request, admin=admin)


def _reject(deletion_request, *, admin, rejection_reason):
    reason = require_text(
        rejection_reason,
        field='Rejection reason',
        min_length=expenses_setting('REJECTION_REASON_MIN_LENGTH'),
    )

    with transaction.atomic():
        now = timezone.now()
        updated = InvoiceDeletionRequest.objects.filter(
            id=deletion_request.id,
            status=DeletionRequestStatus.PENDING,
        ).update(
            status=DeletionRequestStatus.REJECTED,
            rejection_reason=reason,
            reviewed_by=admin,
            reviewed_at=now,
            updated_at=now,
        )
        if not updated:
            logger.warning("Deletion request %s already reviewed", deletion_request.id)
            raise DeletionRequestAlreadyReviewedError()

        send_safely(
            notify_deletion_request_reviewed,
            user_id=deletion_request.requested_by_id,
            invoice_id=deletion_request.invoice_id,
            invoice_number=deletion_request.invoice_number,
            approved=False,
            reason=reason,
        )

    logger.info("Deletion request %s rejected by %s", deletion_request.id, admin.id)
    return InvoiceDeletionRequest.objects.get(id=deletion_request.id)


def _approve(deletion_request, *, admin):
    with transaction.atomic():
        invoice = (
            Invoice.objects
            .select_for_update()
            .filter(id=deletion_request.invoice_id)
            .first()
        )

        now = timezone.now()
        updated = InvoiceDeletionRequest.objects.filter(
            id=deletion_request.id,
            status=DeletionRequestStatus.PENDING,
        ).update(
            status=DeletionRequestStatus.APPROVED,
            reviewed_by=admin,
            reviewed_at=now,
            updated_at=now,
        )
        if not updated:
            logger.warning("Deletion request %s already reviewed", deletion_request.id)
            raise DeletionRequestAlreadyReviewedError()

        # Rolls back the approval above
        if invoice is None:
            raise InvoiceNotFoundError(
                f"Invoice {deletion_request.invoice_number} no longer exists"
            )

        remove_invoice(
            invoice=invoice,
            actor=admin,
            notes=f"Refund for invoice {invoice.invoice_number} deleted on request",
        )

        send_safely(
            notify_deletion_request_reviewed,
            user_id=deletion_request.requested_by_id,
            invoice_number=deletion_request.invoice_number,
            approved=True,
        )

    logger.info(
        "Deletion request %s approved by %s, invoice %s deleted",
        deletion_request.id, admin.id, deletion_request.invoice_id,
    )
    return InvoiceDeletionRequest.objects.get(id=deletion_request.id)


def cancel_deletion_request(*, request_id: UUID, requester: User) -> None:
    """
    Withdraw one's own pending request.

    Raises:
        DeletionRequestNotFoundError: no pending request of the requester with this id
    """
    deleted, _ = InvoiceDeletionRequest.objects.filter(
        id=request_id,
        requested_by=requester,
        status=DeletionRequestStatus.PENDING,
    ).delete()
    if not deleted:
        raise DeletionRequestNotFoundError("No pending deletion request found")
    logger.info("Deletion request %s cancelled by %s", request_id, requester.id)


def list_deletion_requests(
    *, status: Optional[str] = None, limit: int = 50, offset: int = 0
) -> List[InvoiceDeletionRequest]:
    requests = InvoiceDeletionRequest.objects.select_related(
        'invoice', 'requested_by', 'reviewed_by'
    )
    if status:
        requests = requests.filter(status=status)
    return list(requests[offset:offset + limit])


def list_own_deletion_requests(*, user: User) -> List[InvoiceDeletionRequest]:
    return list(
        InvoiceDeletionRequest.objects
        .filter(requested_by=user)
        .select_related('invoice', 'reviewed_by')
    )
