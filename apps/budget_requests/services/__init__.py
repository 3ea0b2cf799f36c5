"""
Budget requests app services layer.

State machine of a user's request for money:
pending -> approved | rejected, approved -> money_transferred -> settled.
"""

from .exceptions import (
    BudgetRequestNotFoundError,
    NoPendingRequestError,
    BudgetRequestValidationError,
    RequesterLacksPermissionError,
    PendingRequestExistsError,
    AlreadyReviewedError,
    InvalidRequestStateError,
    BudgetRequestAccessDeniedError,
)
from .submission import create_budget_request, cancel_budget_request
from .review import (
    review_budget_request,
    confirm_transfer,
    settle_budget_request,
)
from .cleanup import build_bulk_delete_filter, bulk_delete_budget_requests
from .queries import (
    list_own_requests,
    list_requests,
    get_request,
    get_visible_request,
    get_pending_count,
    get_related_invoices,
)

__all__ = [
    # Exceptions
    'BudgetRequestNotFoundError',
    'NoPendingRequestError',
    'BudgetRequestValidationError',
    'RequesterLacksPermissionError',
    'PendingRequestExistsError',
    'AlreadyReviewedError',
    'InvalidRequestStateError',
    'BudgetRequestAccessDeniedError',

    # Workflow
    'create_budget_request',
    'cancel_budget_request',
    'review_budget_request',
    'confirm_transfer',
    'settle_budget_request',

    # Cleanup
    'build_bulk_delete_filter',
    'bulk_delete_budget_requests',

    # Queries
    'list_own_requests',
    'list_requests',
    'get_request',
    'get_visible_request',
    'get_pending_count',
    'get_related_invoices',
]
