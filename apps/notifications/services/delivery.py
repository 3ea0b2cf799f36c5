"""
Notification delivery.

Notifications are a side channel: they are written only after the workflow
transaction committed and a failure never reaches the caller.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction

from apps.accounts.models import UserRole
from apps.core.money import expenses_setting
from apps.notifications.models import Notification, NotificationType

logger = logging.getLogger(__name__)

User = get_user_model()


def send_safely(fn, *args, **kwargs) -> None:
    """
    Run a notify helper once the surrounding transaction commits.

    Outside an atomic block the helper runs immediately. Any exception is
    logged and swallowed.
    """
    def _deliver():
        try:
            fn(*args, **kwargs)
        except Exception:
            logger.warning("Notification %s failed", fn.__name__, exc_info=True)

    transaction.on_commit(_deliver)


def create_notification(
    *,
    user_id: UUID,
    type: str,
    title: str,
    message: str,
    invoice_id: Optional[UUID] = None,
    company_id: Optional[UUID] = None,
) -> Notification:
    return Notification.objects.create(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        invoice_id=invoice_id,
        company_id=company_id,
    )


def _notify_many(user_ids: Iterable[UUID], **fields) -> int:
    notifications = [Notification(user_id=user_id, **fields) for user_id in user_ids]
    Notification.objects.bulk_create(notifications)
    return len(notifications)


def _money(amount) -> str:
    return f"{Decimal(amount):.2f} {expenses_setting('CURRENCY')}"


def notify_budget_request_submitted(*, requester_name: str, amount, company_id: UUID) -> int:
    """Tell every accountant and admin about a new request."""
    reviewer_ids = User.objects.reviewers().values_list('id', flat=True)
    return _notify_many(
        reviewer_ids,
        type=NotificationType.BUDGET_REQUEST_SUBMITTED,
        title='New budget request',
        message=f"{requester_name} requested {_money(amount)}.",
        company_id=company_id,
    )


def notify_budget_request_approved(*, user_id: UUID, amount, company_id: UUID) -> Notification:
    return create_notification(
        user_id=user_id,
        type=NotificationType.BUDGET_REQUEST_APPROVED,
        title='Budget request approved',
        message=f"Your request for {_money(amount)} was approved. The transfer will follow.",
        company_id=company_id,
    )


def notify_budget_request_rejected(
    *, user_id: UUID, amount, reason: str, company_id: UUID
) -> Notification:
    return create_notification(
        user_id=user_id,
        type=NotificationType.BUDGET_REQUEST_REJECTED,
        title='Budget request rejected',
        message=f"Your request for {_money(amount)} was rejected. Reason: {reason}",
        company_id=company_id,
    )


def notify_budget_request_transferred(
    *, user_id: UUID, amount, transfer_number: str, company_id: UUID
) -> Notification:
    return create_notification(
        user_id=user_id,
        type=NotificationType.BUDGET_REQUEST_TRANSFERRED,
        title='Money transferred',
        message=f"{_money(amount)} was transferred (transfer {transfer_number}).",
        company_id=company_id,
    )


def notify_budget_request_settled(
    *, user_id: UUID, amount, invoice_count: int, company_id: UUID
) -> Notification:
    return create_notification(
        user_id=user_id,
        type=NotificationType.BUDGET_REQUEST_SETTLED,
        title='Budget request settled',
        message=(
            f"Your request for {_money(amount)} was settled. "
            f"Invoices closed: {invoice_count}."
        ),
        company_id=company_id,
    )


def notify_advance_transferred(*, user_id: UUID, amount, company_id: UUID) -> Notification:
    return create_notification(
        user_id=user_id,
        type=NotificationType.ADVANCE_TRANSFERRED,
        title='Advance transferred',
        message=f"An advance of {_money(amount)} was credited to your balance.",
        company_id=company_id,
    )


def notify_advance_settled(
    *, user_id: UUID, amount, invoice_count: int, company_id: UUID
) -> Notification:
    return create_notification(
        user_id=user_id,
        type=NotificationType.ADVANCE_SETTLED,
        title='Advance settled',
        message=(
            f"Your advance of {_money(amount)} was settled. "
            f"Invoices closed: {invoice_count}."
        ),
        company_id=company_id,
    )


def notify_balance_adjusted(*, user_id: UUID, amount, balance_after, notes: str) -> Notification:
    return create_notification(
        user_id=user_id,
        type=NotificationType.BALANCE_ADJUSTED,
        title='Balance adjusted',
        message=(
            f"Your balance changed by {_money(amount)} and is now "
            f"{_money(balance_after)}. {notes}"
        ),
    )


def notify_invoice_reviewed(
    *,
    user_id: UUID,
    invoice_id: UUID,
    invoice_number: str,
    status: str,
    reason: Optional[str] = None,
) -> Notification:
    message = f"Invoice {invoice_number} was {status}."
    if reason:
        message += f" Reason: {reason}"
    return create_notification(
        user_id=user_id,
        type=NotificationType.INVOICE_REVIEWED,
        title='Invoice reviewed',
        message=message,
        invoice_id=invoice_id,
    )


def notify_deletion_request_submitted(
    *, invoice_id: UUID, invoice_number: str, requester_name: str
) -> int:
    """Tell every admin that an invoice deletion awaits confirmation."""
    admin_ids = User.objects.filter(
        role=UserRole.ADMIN, is_active=True
    ).values_list('id', flat=True)
    return _notify_many(
        admin_ids,
        type=NotificationType.DELETION_REQUEST_SUBMITTED,
        title='Invoice deletion requested',
        message=f"{requester_name} asked to delete invoice {invoice_number}.",
        invoice_id=invoice_id,
    )


def notify_deletion_request_reviewed(
    *,
    user_id: UUID,
    invoice_number: str,
    approved: bool,
    invoice_id: Optional[UUID] = None,
    reason: Optional[str] = None,
) -> Notification:
    if approved:
        message = f"Invoice {invoice_number} was deleted as requested."
    else:
        message = f"Deletion of invoice {invoice_number} was rejected. Reason: {reason}"
    return create_notification(
        user_id=user_id,
        type=NotificationType.DELETION_REQUEST_REVIEWED,
        title='Deletion request reviewed',
        message=message,
        invoice_id=invoice_id,
    )
