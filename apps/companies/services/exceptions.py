"""
Domain-specific exceptions for companies app.

Each one maps to a generic error kind so the API renders the right status.
"""

from apps.core.exceptions import BadRequestError, ForbiddenError, NotFoundError


class CompanyNotFoundError(NotFoundError):
    """Raised when a company does not exist."""
    default_detail = 'Company not found.'


class CompanyAccessDeniedError(ForbiddenError):
    """Raised when a regular user has no permission for a company."""
    default_detail = 'You do not have access to this company.'


class InvalidPermissionTargetError(BadRequestError):
    """Raised when permissions are granted to a non-regular user or unknown company."""
    default_detail = 'Permissions can only be granted to regular users for existing companies.'


class PermissionUserNotFoundError(NotFoundError):
    """Raised when the user whose permissions are edited does not exist."""
    default_detail = 'User not found.'
