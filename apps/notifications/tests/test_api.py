import pytest
from django.urls import reverse
from rest_framework import status

from apps.notifications.models import Notification, NotificationType


@pytest.fixture
def notification(user):
    return Notification.objects.create(
        user=user,
        type=NotificationType.BALANCE_ADJUSTED,
        title='Balance adjusted',
        message='Your balance changed.',
    )


@pytest.mark.django_db
class TestNotificationApi:

    def test_list_own(self, user_client, notification, other_user):
        Notification.objects.create(
            user=other_user,
            type=NotificationType.BALANCE_ADJUSTED,
            title='Not yours',
            message='Hidden',
        )

        response = user_client.get(reverse('notifications:list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['id'] == str(notification.id)

    def test_unread_count(self, user_client, notification):
        response = user_client.get(reverse('notifications:unread-count'))

        assert response.data['count'] == 1

    def test_mark_read(self, user_client, notification):
        response = user_client.post(reverse('notifications:mark-read', args=[notification.id]))

        assert response.status_code == status.HTTP_200_OK
        notification.refresh_from_db()
        assert notification.read is True

    def test_mark_foreign_is_404(self, other_user_client, notification):
        response = other_user_client.post(reverse('notifications:mark-read', args=[notification.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_mark_all_read(self, user_client, notification):
        user_client.post(reverse('notifications:mark-all-read'))

        assert not Notification.objects.filter(read=False).exists()
