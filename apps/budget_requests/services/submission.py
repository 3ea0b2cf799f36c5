"""Budget request submission and cancellation."""

import logging
from uuid import UUID

from django.db import IntegrityError, transaction

from apps.accounts.models import User
from apps.budget_requests.models import BudgetRequest, BudgetRequestStatus
from apps.companies.services import ensure_company_access
from apps.core.money import expenses_setting, require_text, to_amount
from apps.notifications.services import send_safely, notify_budget_request_submitted

from .exceptions import PendingRequestExistsError, NoPendingRequestError

logger = logging.getLogger(__name__)


def create_budget_request(
    *,
    user: User,
    company_id: UUID,
    requested_amount,
    justification: str
) -> BudgetRequest:
    """
    File a budget request against a company.

    The user's balance at this moment is stored with the request. Every
    accountant and admin is notified after commit.

    Raises:
        CompanyAccessDeniedError: regular user without permission for the company
        CompanyNotFoundError: company doesn't exist
        BadRequestError: invalid amount or justification
        PendingRequestExistsError: a pending request for the company exists
    """
    company = ensure_company_access(user=user, company_id=company_id)
    amount = to_amount(requested_amount)
    justification = require_text(
        justification,
        field='Justification',
        min_length=expenses_setting('JUSTIFICATION_MIN_LENGTH'),
        max_length=expenses_setting('JUSTIFICATION_MAX_LENGTH'),
    )

    if BudgetRequest.objects.filter(
        user=user,
        company=company,
        status=BudgetRequestStatus.PENDING,
    ).exists():
        raise PendingRequestExistsError()

    try:
        with transaction.atomic():
            current_balance = User.objects.values_list('balance', flat=True).get(id=user.id)
            budget_request = BudgetRequest.objects.create(
                user=user,
                company=company,
                requested_amount=amount,
                current_balance_at_request=current_balance,
                justification=justification,
            )
            send_safely(
                notify_budget_request_submitted,
                requester_name=user.get_display_name(),
                amount=amount,
                company_id=company.id,
            )
    except IntegrityError:
        # Partial unique index on pending requests per (user, company)
        raise PendingRequestExistsError()

    logger.info("Budget request %s (%s) created by %s", budget_request.id, amount, user.id)
    return budget_request


def cancel_budget_request(*, request_id: UUID, user: User) -> None:
    """
    Withdraw one's own pending request. Ownership and status are part of
    the delete filter.

    Raises:
        NoPendingRequestError: nothing matched
    """
    deleted, _ = BudgetRequest.objects.filter(
        id=request_id,
        user=user,
        status=BudgetRequestStatus.PENDING,
    ).delete()
    if not deleted:
        raise NoPendingRequestError()
    logger.info("Budget request %s cancelled by %s", request_id, user.id)
