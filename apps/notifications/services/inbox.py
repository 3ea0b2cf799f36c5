"""Reading and acknowledging one's own notifications."""

from uuid import UUID

from django.db.models import QuerySet

from apps.notifications.models import Notification

from .exceptions import NotificationNotFoundError


def list_notifications(*, user, unread_only: bool = False) -> QuerySet:
    notifications = Notification.objects.filter(user=user)
    if unread_only:
        notifications = notifications.filter(read=False)
    return notifications


def get_unread_count(*, user) -> int:
    return Notification.objects.filter(user=user, read=False).count()


def mark_read(*, user, notification_id: UUID) -> None:
    """
    Raises:
        NotificationNotFoundError: If the notification is not the caller's
    """
    updated = Notification.objects.filter(id=notification_id, user=user).update(read=True)
    if not updated:
        raise NotificationNotFoundError()


def mark_all_read(*, user) -> int:
    return Notification.objects.filter(user=user, read=False).update(read=True)
