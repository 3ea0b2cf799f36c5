"""Delivery and inbox service tests for notifications app."""

import pytest
from uuid import uuid4
from decimal import Decimal
from unittest.mock import Mock

from django.db import transaction

from apps.notifications.models import Notification, NotificationType
from apps.notifications.services import (
    send_safely,
    notify_budget_request_submitted,
    notify_deletion_request_submitted,
    list_notifications,
    get_unread_count,
    mark_read,
    mark_all_read,
)
from apps.notifications.services.exceptions import NotificationNotFoundError


@pytest.mark.django_db
class TestSendSafely:

    def test_runs_only_after_commit(self, django_capture_on_commit_callbacks):
        helper = Mock(__name__='helper')

        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            with transaction.atomic():
                send_safely(helper, user_id=1)

        helper.assert_not_called()
        assert len(callbacks) == 1

        callbacks[0]()
        helper.assert_called_once_with(user_id=1)

    def test_rolled_back_transaction_sends_nothing(self, django_capture_on_commit_callbacks):
        helper = Mock(__name__='helper')

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    send_safely(helper)
                    raise RuntimeError('workflow failed')

        assert callbacks == []
        helper.assert_not_called()

    def test_exceptions_are_swallowed(self, django_capture_on_commit_callbacks):
        helper = Mock(__name__='helper', side_effect=RuntimeError('boom'))

        with django_capture_on_commit_callbacks(execute=True):
            send_safely(helper)

        helper.assert_called_once()


@pytest.mark.django_db
class TestFanOut:

    def test_submitted_reaches_every_reviewer(self, user, accountant, admin_user, company):
        count = notify_budget_request_submitted(
            requester_name='Test User',
            amount=Decimal('150.00'),
            company_id=company.id,
        )

        assert count == 2
        recipients = set(Notification.objects.values_list('user_id', flat=True))
        assert recipients == {accountant.id, admin_user.id}
        assert '150.00 PLN' in Notification.objects.first().message

    def test_deletion_request_reaches_admins_only(self, accountant, admin_user):
        notify_deletion_request_submitted(
            invoice_id=uuid4(),
            invoice_number='FV/1/2026',
            requester_name='Test User',
        )

        assert list(Notification.objects.values_list('user_id', flat=True)) == [admin_user.id]


@pytest.mark.django_db
class TestInbox:

    @pytest.fixture
    def notifications(self, user):
        return [
            Notification.objects.create(
                user=user,
                type=NotificationType.INVOICE_REVIEWED,
                title=f'Invoice {i}',
                message='Invoice reviewed',
            )
            for i in range(3)
        ]

    def test_unread_count_and_mark_read(self, user, notifications):
        assert get_unread_count(user=user) == 3

        mark_read(user=user, notification_id=notifications[0].id)

        assert get_unread_count(user=user) == 2
        assert list(list_notifications(user=user, unread_only=True)) != []

    def test_cannot_mark_foreign_notification(self, other_user, notifications):
        with pytest.raises(NotificationNotFoundError):
            mark_read(user=other_user, notification_id=notifications[0].id)

    def test_mark_all_read(self, user, notifications):
        assert mark_all_read(user=user) == 3
        assert get_unread_count(user=user) == 0
