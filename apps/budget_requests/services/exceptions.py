"""
Domain-specific exceptions for budget_requests app.

Conflicts come in two flavours: a second pending request for the same
company, and a review that lost the race against another accountant.
"""

from apps.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError


class BudgetRequestNotFoundError(NotFoundError):
    """Raised when a budget request does not exist."""
    default_detail = 'Budget request not found.'


class NoPendingRequestError(NotFoundError):
    """Raised when cancelling something that is not the caller's pending request."""
    default_detail = 'No pending budget request found.'


class BudgetRequestValidationError(BadRequestError):
    """Raised when budget request input is invalid."""
    default_detail = 'Invalid budget request.'


class RequesterLacksPermissionError(ForbiddenError):
    """Raised when the request owner no longer has access to the company."""
    default_detail = 'The requester no longer has access to this company.'


class PendingRequestExistsError(ConflictError):
    """Raised when the user already has a pending request for the company."""
    default_detail = 'You already have a pending budget request for this company.'


class AlreadyReviewedError(ConflictError):
    """Raised when another reviewer already processed the request."""
    default_detail = 'This request was already processed by someone else. Refresh and try again.'


class InvalidRequestStateError(ConflictError):
    """Raised when the request is not in the state the action requires."""
    default_detail = 'The budget request is not in the required state.'


class BudgetRequestAccessDeniedError(ForbiddenError):
    """Raised when a regular user opens someone else's request."""
    default_detail = 'You do not have access to this budget request.'
