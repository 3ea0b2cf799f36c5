"""Notifications app services layer."""

from .delivery import (
    send_safely,
    create_notification,
    notify_budget_request_submitted,
    notify_budget_request_approved,
    notify_budget_request_rejected,
    notify_budget_request_transferred,
    notify_budget_request_settled,
    notify_advance_transferred,
    notify_advance_settled,
    notify_balance_adjusted,
    notify_invoice_reviewed,
    notify_deletion_request_submitted,
    notify_deletion_request_reviewed,
)
from .exceptions import NotificationNotFoundError
from .inbox import (
    list_notifications,
    get_unread_count,
    mark_read,
    mark_all_read,
)

__all__ = [
    'send_safely',
    'create_notification',
    'notify_budget_request_submitted',
    'notify_budget_request_approved',
    'notify_budget_request_rejected',
    'notify_budget_request_transferred',
    'notify_budget_request_settled',
    'notify_advance_transferred',
    'notify_advance_settled',
    'notify_balance_adjusted',
    'notify_invoice_reviewed',
    'notify_deletion_request_submitted',
    'notify_deletion_request_reviewed',
    'NotificationNotFoundError',
    'list_notifications',
    'get_unread_count',
    'mark_read',
    'mark_all_read',
]
