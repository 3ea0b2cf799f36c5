"""Domain-specific exceptions for notifications services."""

from apps.core.exceptions import NotFoundError


class NotificationNotFoundError(NotFoundError):
    """Raised when a notification does not exist or belongs to someone else."""
    default_detail = 'Notification not found.'
