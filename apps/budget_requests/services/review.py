"""
Budget request review, transfer confirmation and settlement.

Each transition is one conditional UPDATE on (id, expected status). The
affected-row count is the concurrency check: zero rows means another
accountant already moved the request, and the caller gets a conflict.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.advances.models import Advance
from apps.advances.services import create_for_budget_request, DuplicateAdvanceError
from apps.budget_requests.models import BudgetRequest, BudgetRequestStatus
from apps.companies.services import has_company_permission
from apps.core.money import expenses_setting, require_text
from apps.invoices.models import InvoiceStatus
from apps.invoices.services import settle_linked_invoices
from apps.notifications.services import (
    send_safely,
    notify_budget_request_approved,
    notify_budget_request_rejected,
    notify_budget_request_transferred,
    notify_budget_request_settled,
)

from .exceptions import (
    BudgetRequestNotFoundError,
    BudgetRequestValidationError,
    RequesterLacksPermissionError,
    AlreadyReviewedError,
    InvalidRequestStateError,
)

logger = logging.getLogger(__name__)

REVIEW_ACTIONS = ('approve', 'reject')


def _get_request(request_id: UUID) -> BudgetRequest:
    try:
        return BudgetRequest.objects.select_related('user').get(id=request_id)
    except BudgetRequest.DoesNotExist:
        raise BudgetRequestNotFoundError(f"Budget request {request_id} not found")


def review_budget_request(
    *,
    request_id: UUID,
    reviewer: User,
    action: str,
    rejection_reason: Optional[str] = None,
) -> Tuple[BudgetRequest, Optional[Advance]]:
    """
    Approve or reject a pending request.

    Approval creates the pending advance that will later carry the money;
    the balance is not touched here.

    Returns the updated request and, on approval, the new advance.

    Raises:
        BudgetRequestValidationError: unknown action
        BudgetRequestNotFoundError: request doesn't exist
        RequesterLacksPermissionError: owner lost access to the company
        AlreadyReviewedError: request is no longer pending
        BadRequestError: rejection reason too short
    """
    if action not in REVIEW_ACTIONS:
        raise BudgetRequestValidationError("Action must be 'approve' or 'reject'")

    budget_request = _get_request(request_id)

    owner = budget_request.user
    if owner.role == UserRole.USER and not has_company_permission(
        user=owner, company_id=budget_request.company_id
    ):
        raise RequesterLacksPermissionError()

    if budget_request.status != BudgetRequestStatus.PENDING:
        raise AlreadyReviewedError()

    if action == 'reject':
        return _reject(budget_request, reviewer=reviewer, rejection_reason=rejection_reason), None
    return _approve(budget_request, reviewer=reviewer)


def _reject(budget_request, *, reviewer, rejection_reason):
    reason = require_text(
        rejection_reason,
        field='Rejection reason',
        min_length=expenses_setting('REJECTION_REASON_MIN_LENGTH'),
    )

    with transaction.atomic():
        now = timezone.now()
        updated = BudgetRequest.objects.filter(
            id=budget_request.id,
            status=BudgetRequestStatus.PENDING,
        ).update(
            status=BudgetRequestStatus.REJECTED,
            rejection_reason=reason,
            reviewed_by=reviewer,
            reviewed_at=now,
            updated_at=now,
        )
        if not updated:
            logger.warning("Budget request %s already reviewed, rejection dropped", budget_request.id)
            raise AlreadyReviewedError()

        send_safely(
            notify_budget_request_rejected,
            user_id=budget_request.user_id,
            amount=budget_request.requested_amount,
            reason=reason,
            company_id=budget_request.company_id,
        )

    logger.info("Budget request %s rejected by %s", budget_request.id, reviewer.id)
    return _get_request(budget_request.id)


def _approve(budget_request, *, reviewer):
    with transaction.atomic():
        try:
            advance = create_for_budget_request(
                budget_request=budget_request,
                created_by=reviewer,
            )
        except DuplicateAdvanceError:
            logger.warning("Budget request %s already has an advance", budget_request.id)
            raise AlreadyReviewedError()

        now = timezone.now()
        updated = BudgetRequest.objects.filter(
            id=budget_request.id,
            status=BudgetRequestStatus.PENDING,
        ).update(
            status=BudgetRequestStatus.APPROVED,
            reviewed_by=reviewer,
            reviewed_at=now,
            updated_at=now,
        )
        if not updated:
            logger.warning("Budget request %s already reviewed, advance rolled back", budget_request.id)
            raise AlreadyReviewedError()

        send_safely(
            notify_budget_request_approved,
            user_id=budget_request.user_id,
            amount=budget_request.requested_amount,
            company_id=budget_request.company_id,
        )

    logger.info(
        "Budget request %s approved by %s, advance %s created",
        budget_request.id, reviewer.id, advance.id,
    )
    return _get_request(budget_request.id), advance


def _raise_for_wrong_state(request_id: UUID, expected: str):
    current = BudgetRequest.objects.filter(id=request_id).values_list('status', flat=True).first()
    if current is None:
        raise BudgetRequestNotFoundError(f"Budget request {request_id} not found")
    logger.warning("Budget request %s is %s, expected %s", request_id, current, expected)
    raise InvalidRequestStateError(
        f"Budget request is '{current}', expected '{expected}'"
    )


def confirm_transfer(*, request_id: UUID, confirmer: User, transfer_number: str) -> BudgetRequest:
    """
    Record the bank transfer of an approved request.

    Raises:
        BadRequestError: transfer number out of bounds
        BudgetRequestNotFoundError: request doesn't exist
        InvalidRequestStateError: request is not approved
    """
    transfer_number = require_text(
        transfer_number,
        field='Transfer number',
        min_length=expenses_setting('TRANSFER_NUMBER_MIN_LENGTH'),
        max_length=expenses_setting('TRANSFER_NUMBER_MAX_LENGTH'),
    )

    with transaction.atomic():
        now = timezone.now()
        updated = BudgetRequest.objects.filter(
            id=request_id,
            status=BudgetRequestStatus.APPROVED,
        ).update(
            status=BudgetRequestStatus.MONEY_TRANSFERRED,
            transfer_number=transfer_number,
            transfer_date=now,
            transfer_confirmed_by=confirmer,
            transfer_confirmed_at=now,
            updated_at=now,
        )
        if not updated:
            _raise_for_wrong_state(request_id, BudgetRequestStatus.APPROVED)

        budget_request = _get_request(request_id)
        send_safely(
            notify_budget_request_transferred,
            user_id=budget_request.user_id,
            amount=budget_request.requested_amount,
            transfer_number=transfer_number,
            company_id=budget_request.company_id,
        )

    logger.info("Budget request %s transfer %s confirmed by %s", request_id, transfer_number, confirmer.id)
    return budget_request


def settle_budget_request(*, request_id: UUID, settler: User) -> Tuple[BudgetRequest, List[UUID]]:
    """
    Close a transferred request together with the invoices it funded.

    Invoices linked to the request that are transferred or accepted are
    settled in the same transaction. Returns the request and their ids.

    Raises:
        BudgetRequestNotFoundError: request doesn't exist
        InvalidRequestStateError: money was not transferred yet, or already settled
    """
    with transaction.atomic():
        now = timezone.now()
        updated = BudgetRequest.objects.filter(
            id=request_id,
            status=BudgetRequestStatus.MONEY_TRANSFERRED,
        ).update(
            status=BudgetRequestStatus.SETTLED,
            settled_by=settler,
            settled_at=now,
            updated_at=now,
        )
        if not updated:
            _raise_for_wrong_state(request_id, BudgetRequestStatus.MONEY_TRANSFERRED)

        invoice_ids = settle_linked_invoices(
            settled_by=settler,
            budget_request_id=request_id,
            statuses=[InvoiceStatus.TRANSFERRED, InvoiceStatus.ACCEPTED],
        )

        budget_request = _get_request(request_id)
        send_safely(
            notify_budget_request_settled,
            user_id=budget_request.user_id,
            amount=budget_request.requested_amount,
            invoice_count=len(invoice_ids),
            company_id=budget_request.company_id,
        )

    logger.info(
        "Budget request %s settled by %s with %d invoice(s)",
        request_id, settler.id, len(invoice_ids),
    )
    return budget_request, invoice_ids
