"""
Service layer unit tests for the invoice deletion-request workflow.
"""

import pytest
from decimal import Decimal
from uuid import uuid4
from unittest.mock import patch

from django.core.files.storage import default_storage

from apps.accounts.services.exceptions import InvalidPasswordError
from apps.core.exceptions import BadRequestError
from apps.invoices.models import Invoice, InvoiceDeletionRequest, DeletionRequestStatus
from apps.invoices.services import (
    create_deletion_request,
    review_deletion_request,
    cancel_deletion_request,
    list_deletion_requests,
    list_own_deletion_requests,
)
from apps.invoices.services.exceptions import (
    InvoiceNotFoundError,
    InvoiceAccessDeniedError,
    DeletionRequestNotFoundError,
    DuplicateDeletionRequestError,
    DeletionRequestAlreadyReviewedError,
)
from apps.ledger.models import LedgerTransaction, TransactionType
from apps.ledger.services import get_balance, verify_ledger
from apps.notifications.models import Notification, NotificationType


# =============================================================================
# Creating requests
# =============================================================================

@pytest.mark.django_db
class TestCreateDeletionRequest:

    def test_create_notifies_admins(
        self, invoice, user, admin_user, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            deletion_request = create_deletion_request(
                invoice_id=invoice.id,
                requester=user,
                reason='Submitted twice by mistake',
            )

        assert deletion_request.status == DeletionRequestStatus.PENDING
        assert deletion_request.invoice_number == invoice.invoice_number
        assert Notification.objects.filter(
            user=admin_user, type=NotificationType.DELETION_REQUEST_SUBMITTED
        ).exists()

    def test_duplicate_pending_request(self, deletion_request, invoice, user):
        with pytest.raises(DuplicateDeletionRequestError):
            create_deletion_request(
                invoice_id=invoice.id,
                requester=user,
                reason='Still submitted twice',
            )

    def test_other_users_invoice(self, invoice, other_user):
        with pytest.raises(InvoiceAccessDeniedError):
            create_deletion_request(
                invoice_id=invoice.id,
                requester=other_user,
                reason='Not my invoice at all',
            )

    def test_accountant_may_request(self, invoice, accountant):
        deletion_request = create_deletion_request(
            invoice_id=invoice.id,
            requester=accountant,
            reason='Duplicate of an earlier scan',
        )

        assert deletion_request.requested_by == accountant

    def test_short_reason(self, invoice, user):
        with pytest.raises(BadRequestError):
            create_deletion_request(invoice_id=invoice.id, requester=user, reason='dup')

    def test_unknown_invoice(self, user):
        with pytest.raises(InvoiceNotFoundError):
            create_deletion_request(invoice_id=uuid4(), requester=user, reason='Submitted twice')


# =============================================================================
# Reviewing requests
# =============================================================================

@pytest.mark.django_db
class TestReviewDeletionRequest:

    def test_approve_refunds_and_deletes(
        self, deletion_request, invoice, admin_user, password, funded_user,
        django_capture_on_commit_callbacks,
    ):
        with django_capture_on_commit_callbacks(execute=True):
            reviewed = review_deletion_request(
                request_id=deletion_request.id,
                admin=admin_user,
                action='approve',
                admin_password=password,
            )

        assert reviewed.status == DeletionRequestStatus.APPROVED
        assert reviewed.reviewed_by == admin_user
        assert reviewed.invoice_id is None
        assert reviewed.invoice_number == 'FV/2026/10/001'
        assert not Invoice.objects.filter(id=invoice.id).exists()
        assert not default_storage.exists(invoice.image_key)
        assert get_balance(user_id=funded_user.id) == Decimal('100.00')
        assert verify_ledger(user_id=funded_user.id) is True
        assert Notification.objects.filter(
            user=funded_user, type=NotificationType.DELETION_REQUEST_REVIEWED
        ).exists()

    def test_second_approval_conflicts(self, deletion_request, admin_user, password, funded_user):
        review_deletion_request(
            request_id=deletion_request.id, admin=admin_user, action='approve', admin_password=password,
        )

        with pytest.raises(DeletionRequestAlreadyReviewedError):
            review_deletion_request(
                request_id=deletion_request.id, admin=admin_user, action='approve', admin_password=password,
            )

        assert get_balance(user_id=funded_user.id) == Decimal('100.00')

    def test_concurrent_approval_refunds_once(
        self, deletion_request, invoice, admin_user, password, funded_user
    ):
        """Simulates a stale read: a second admin acts on a pending copy loaded before the first approval."""
        stale = InvoiceDeletionRequest.objects.get(id=deletion_request.id)
        review_deletion_request(
            request_id=deletion_request.id, admin=admin_user, action='approve', admin_password=password,
        )

        with patch(
            'apps.invoices.services.deletion_requests._get_deletion_request',
            return_value=stale,
        ):
            with pytest.raises(DeletionRequestAlreadyReviewedError):
                review_deletion_request(
                    request_id=deletion_request.id,
                    admin=admin_user,
                    action='approve',
                    admin_password=password,
                )

        refunds = LedgerTransaction.objects.filter(
            reference_id=invoice.id,
            transaction_type=TransactionType.INVOICE_DELETE_REFUND,
        )
        assert refunds.count() == 1
        assert get_balance(user_id=funded_user.id) == Decimal('100.00')

    def test_approve_when_invoice_already_gone(self, deletion_request, invoice, admin_user, password):
        """The request stays pending when its invoice was removed behind its back."""
        Invoice.objects.filter(id=invoice.id).delete()

        with pytest.raises(InvoiceNotFoundError):
            review_deletion_request(
                request_id=deletion_request.id,
                admin=admin_user,
                action='approve',
                admin_password=password,
            )

        deletion_request.refresh_from_db()
        assert deletion_request.status == DeletionRequestStatus.PENDING
        assert deletion_request.reviewed_by is None
        assert not LedgerTransaction.objects.filter(
            transaction_type=TransactionType.INVOICE_DELETE_REFUND,
        ).exists()

    def test_scan_removal_failure_is_logged(
        self, deletion_request, invoice, admin_user, password,
        django_capture_on_commit_callbacks,
    ):
        with patch('apps.invoices.storage.logger') as storage_logger, \
                patch('apps.invoices.storage.delete_blob', side_effect=OSError('storage offline')):
            with django_capture_on_commit_callbacks(execute=True):
                reviewed = review_deletion_request(
                    request_id=deletion_request.id,
                    admin=admin_user,
                    action='approve',
                    admin_password=password,
                )

        assert reviewed.status == DeletionRequestStatus.APPROVED
        assert not Invoice.objects.filter(id=invoice.id).exists()
        storage_logger.error.assert_called_once()

    def test_reject(self, deletion_request, invoice, admin_user, password, funded_user):
        reviewed = review_deletion_request(
            request_id=deletion_request.id,
            admin=admin_user,
            action='reject',
            admin_password=password,
            rejection_reason='The invoice is a valid expense',
        )

        assert reviewed.status == DeletionRequestStatus.REJECTED
        assert reviewed.rejection_reason == 'The invoice is a valid expense'
        assert Invoice.objects.filter(id=invoice.id).exists()
        assert get_balance(user_id=funded_user.id) == Decimal('70.00')

    def test_reject_needs_reason(self, deletion_request, admin_user, password):
        with pytest.raises(BadRequestError):
            review_deletion_request(
                request_id=deletion_request.id,
                admin=admin_user,
                action='reject',
                admin_password=password,
                rejection_reason='no',
            )

    def test_password_checked_first(self, admin_user):
        with pytest.raises(InvalidPasswordError):
            review_deletion_request(
                request_id=uuid4(), admin=admin_user, action='approve', admin_password='wrong',
            )

    def test_unknown_action(self, deletion_request, admin_user, password):
        with pytest.raises(BadRequestError):
            review_deletion_request(
                request_id=deletion_request.id, admin=admin_user, action='archive', admin_password=password,
            )

    def test_unknown_request(self, admin_user, password):
        with pytest.raises(DeletionRequestNotFoundError):
            review_deletion_request(
                request_id=uuid4(), admin=admin_user, action='approve', admin_password=password,
            )


# =============================================================================
# Cancelling and listing
# =============================================================================

@pytest.mark.django_db
class TestCancelAndList:

    def test_cancel_own_request(self, deletion_request, user):
        cancel_deletion_request(request_id=deletion_request.id, requester=user)

        assert not InvoiceDeletionRequest.objects.filter(id=deletion_request.id).exists()

    def test_cancel_someone_elses_request(self, deletion_request, other_user):
        with pytest.raises(DeletionRequestNotFoundError):
            cancel_deletion_request(request_id=deletion_request.id, requester=other_user)

    def test_cancel_reviewed_request(self, deletion_request, user, admin_user, password):
        review_deletion_request(
            request_id=deletion_request.id,
            admin=admin_user,
            action='reject',
            admin_password=password,
            rejection_reason='The invoice is a valid expense',
        )

        with pytest.raises(DeletionRequestNotFoundError):
            cancel_deletion_request(request_id=deletion_request.id, requester=user)

    def test_listing(self, deletion_request, user, other_user):
        assert list_deletion_requests() == [deletion_request]
        assert list_deletion_requests(status=DeletionRequestStatus.REJECTED) == []
        assert list_own_deletion_requests(user=user) == [deletion_request]
        assert list_own_deletion_requests(user=other_user) == []
