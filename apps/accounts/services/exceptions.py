"""Domain-specific exceptions for accounts services."""

from apps.core.exceptions import BadRequestError, ConflictError, UnauthorizedError, NotFoundError


class UserRegistrationError(BadRequestError):
    """Raised when user registration fails."""
    default_detail = 'Registration failed.'


class InvalidCredentialsError(UnauthorizedError):
    """Raised when authentication credentials are invalid."""
    default_detail = 'Invalid email or password.'


class InactiveAccountError(UnauthorizedError):
    """Raised when account is deactivated."""
    default_detail = 'Account is deactivated.'


class InvalidPasswordError(UnauthorizedError):
    """Raised when a password re-verification fails."""
    default_detail = 'Invalid password.'


class UserNotFoundError(NotFoundError):
    """Raised when user does not exist."""
    default_detail = 'User not found.'


class WeakPasswordError(BadRequestError):
    """Raised when a new password fails the password validators."""
    default_detail = 'Password is too weak.'


class SelfModificationError(BadRequestError):
    """Raised when an admin would lock itself out."""
    default_detail = 'You cannot apply this change to your own account.'


class PasswordChangedConcurrentlyError(ConflictError):
    """Raised when the account changed between loading and saving."""
    default_detail = 'The password was changed in another session. Refresh and try again.'
