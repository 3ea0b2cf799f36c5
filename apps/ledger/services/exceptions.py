"""Domain-specific exceptions for ledger services."""

from apps.core.exceptions import ForbiddenError, NotFoundError


class LedgerUserNotFoundError(NotFoundError):
    """Raised when the balance owner does not exist."""
    default_detail = 'User not found.'


class LedgerAccessDeniedError(ForbiddenError):
    """Raised when a regular user reads someone else's history."""
    default_detail = "You can only view your own balance history."
