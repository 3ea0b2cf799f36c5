"""
Service layer unit tests for advances app.

Tests cover:
- Manual creation and validation
- Transfer crediting the balance atomically
- Settlement cascade over linked invoices
- Deletion strategies and credit reversal
"""

import pytest
from decimal import Decimal
from uuid import uuid4
from unittest.mock import patch

from django.db import DatabaseError

from apps.accounts.services.exceptions import InvalidPasswordError
from apps.advances.models import Advance, AdvanceStatus
from apps.advances.services import (
    create_manual,
    transfer,
    settle,
    delete_advance,
    list_advances,
    get_advance_detail,
    DELETE_WITH_INVOICES,
    REASSIGN_INVOICES,
)
from apps.advances.services.exceptions import (
    AdvanceNotFoundError,
    AdvanceUserNotFoundError,
    AdvanceAlreadyProcessedError,
    AdvanceNotTransferredError,
    InvalidDeleteStrategyError,
)
from apps.core.exceptions import BadRequestError
from apps.invoices.models import (
    Invoice,
    InvoiceStatus,
    InvoiceDeletionRequest,
    DeletionRequestStatus,
)
from apps.ledger.models import LedgerTransaction, TransactionType
from apps.ledger.services import get_balance, verify_ledger
from apps.notifications.models import Notification, NotificationType


# =============================================================================
# Creation
# =============================================================================

@pytest.mark.django_db
class TestCreateManual:

    def test_create_success(self, accountant, user, company):
        advance = create_manual(
            creator=accountant,
            user_id=user.id,
            company_id=company.id,
            amount='120.50',
            description='Conference fee',
        )

        assert advance.status == AdvanceStatus.PENDING
        assert advance.amount == Decimal('120.50')
        assert get_balance(user_id=user.id) == Decimal('0.00')

    def test_unknown_user(self, accountant, company):
        with pytest.raises(AdvanceUserNotFoundError):
            create_manual(
                creator=accountant,
                user_id=uuid4(),
                company_id=company.id,
                amount='10.00',
                description='Conference fee',
            )

    @pytest.mark.parametrize('amount', ['0', '-5.00', '1.234', 'abc'])
    def test_invalid_amount(self, accountant, user, company, amount):
        with pytest.raises(BadRequestError):
            create_manual(
                creator=accountant,
                user_id=user.id,
                company_id=company.id,
                amount=amount,
                description='Conference fee',
            )

    def test_description_too_short(self, accountant, user, company):
        with pytest.raises(BadRequestError):
            create_manual(
                creator=accountant,
                user_id=user.id,
                company_id=company.id,
                amount='10.00',
                description='abc',
            )


# =============================================================================
# Transfer
# =============================================================================

@pytest.mark.django_db
class TestTransfer:

    def test_transfer_credits_balance(
        self, pending_advance, accountant, user, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            advance = transfer(
                advance_id=pending_advance.id,
                confirmer=accountant,
                transfer_number='TR-2026-01',
            )

        assert advance.status == AdvanceStatus.TRANSFERRED
        assert advance.transfer_confirmed_by == accountant
        assert get_balance(user_id=user.id) == Decimal('300.00')

        entry = LedgerTransaction.objects.get(user=user)
        assert entry.transaction_type == TransactionType.ADVANCE_CREDIT
        assert entry.reference_id == advance.id
        assert Notification.objects.filter(
            user=user, type=NotificationType.ADVANCE_TRANSFERRED
        ).exists()

    def test_second_transfer_conflicts(self, transferred_advance, accountant, user):
        with pytest.raises(AdvanceAlreadyProcessedError):
            transfer(advance_id=transferred_advance.id, confirmer=accountant)

        assert get_balance(user_id=user.id) == Decimal('300.00')

    def test_lost_race_rolls_back_credit(self, pending_advance, accountant, user):
        """A stale read that passes the status check still credits only once."""
        transfer(advance_id=pending_advance.id, confirmer=accountant)

        stale = Advance.objects.get(id=pending_advance.id)
        stale.status = AdvanceStatus.PENDING
        with patch('apps.advances.services.advance_workflow._get_advance', return_value=stale):
            with pytest.raises(AdvanceAlreadyProcessedError):
                transfer(advance_id=pending_advance.id, confirmer=accountant)

        assert get_balance(user_id=user.id) == Decimal('300.00')
        assert LedgerTransaction.objects.filter(user=user).count() == 1

    def test_ledger_failure_leaves_everything_untouched(
        self, pending_advance, accountant, user, fund_user
    ):
        fund_user(user, '100.00')

        with patch.object(LedgerTransaction.objects, 'create', side_effect=DatabaseError):
            with pytest.raises(DatabaseError):
                transfer(advance_id=pending_advance.id, confirmer=accountant)

        assert get_balance(user_id=user.id) == Decimal('100.00')
        assert Advance.objects.get(id=pending_advance.id).status == AdvanceStatus.PENDING
        assert verify_ledger(user_id=user.id) is True

    def test_unknown_advance(self, accountant):
        with pytest.raises(AdvanceNotFoundError):
            transfer(advance_id=uuid4(), confirmer=accountant)


# =============================================================================
# Settlement
# =============================================================================

@pytest.mark.django_db
class TestSettle:

    def test_settle_cascades_accepted_invoices_only(
        self, transferred_advance, accountant, user, make_invoice
    ):
        accepted = make_invoice(user, advance=transferred_advance, status=InvoiceStatus.ACCEPTED)
        pending = make_invoice(user, advance=transferred_advance, status=InvoiceStatus.PENDING)
        unlinked = make_invoice(user, status=InvoiceStatus.ACCEPTED)

        advance, invoice_ids = settle(advance_id=transferred_advance.id, settler=accountant)

        assert advance.status == AdvanceStatus.SETTLED
        assert invoice_ids == [accepted.id]
        accepted.refresh_from_db()
        assert accepted.status == InvoiceStatus.SETTLED
        assert accepted.settled_by == accountant
        assert Invoice.objects.get(id=pending.id).status == InvoiceStatus.PENDING
        assert Invoice.objects.get(id=unlinked.id).status == InvoiceStatus.ACCEPTED

    def test_settle_pending_advance(self, pending_advance, accountant):
        with pytest.raises(AdvanceNotTransferredError):
            settle(advance_id=pending_advance.id, settler=accountant)

    def test_settle_twice(self, transferred_advance, accountant):
        settle(advance_id=transferred_advance.id, settler=accountant)

        with pytest.raises(AdvanceAlreadyProcessedError):
            settle(advance_id=transferred_advance.id, settler=accountant)


# =============================================================================
# Deletion
# =============================================================================

@pytest.mark.django_db
class TestDeleteAdvance:

    def test_wrong_password(self, pending_advance, accountant):
        with pytest.raises(InvalidPasswordError):
            delete_advance(
                advance_id=pending_advance.id,
                actor=accountant,
                password='nope',
                strategy=DELETE_WITH_INVOICES,
            )

        assert Advance.objects.filter(id=pending_advance.id).exists()

    def test_unknown_strategy(self, pending_advance, accountant, password):
        with pytest.raises(InvalidDeleteStrategyError):
            delete_advance(
                advance_id=pending_advance.id,
                actor=accountant,
                password=password,
                strategy='shred',
            )

    def test_delete_pending_without_invoices(self, pending_advance, accountant, password, user):
        summary = delete_advance(
            advance_id=pending_advance.id,
            actor=accountant,
            password=password,
            strategy=DELETE_WITH_INVOICES,
        )

        assert summary == {'deleted_invoices': 0, 'reassigned_invoices': 0, 'credit_reversed': False}
        assert not Advance.objects.filter(id=pending_advance.id).exists()
        assert not LedgerTransaction.objects.filter(user=user).exists()

    def test_delete_transferred_with_invoices(
        self, transferred_advance, accountant, password, user, make_invoice
    ):
        invoice = make_invoice(user, advance=transferred_advance, amount=Decimal('40.00'))

        summary = delete_advance(
            advance_id=transferred_advance.id,
            actor=accountant,
            password=password,
            strategy=DELETE_WITH_INVOICES,
        )

        assert summary['deleted_invoices'] == 1
        assert summary['credit_reversed'] is True
        assert not Invoice.objects.filter(id=invoice.id).exists()
        # +300 credit, +40 refund, -300 reversal
        assert get_balance(user_id=user.id) == Decimal('40.00')
        assert verify_ledger(user_id=user.id) is True

    def test_delete_with_invoices_closes_pending_deletion_requests(
        self, pending_advance, accountant, password, user, make_invoice
    ):
        invoice = make_invoice(user, advance=pending_advance, amount=Decimal('25.00'))
        deletion_request = InvoiceDeletionRequest.objects.create(
            invoice=invoice,
            invoice_number=invoice.invoice_number,
            requested_by=user,
            reason='Duplicate of another receipt',
        )

        delete_advance(
            advance_id=pending_advance.id,
            actor=accountant,
            password=password,
            strategy=DELETE_WITH_INVOICES,
        )

        deletion_request.refresh_from_db()
        assert deletion_request.status == DeletionRequestStatus.APPROVED
        assert deletion_request.reviewed_by == accountant
        assert deletion_request.reviewed_at is not None
        assert not InvoiceDeletionRequest.objects.filter(
            requested_by=user, status=DeletionRequestStatus.PENDING
        ).exists()

    def test_reassign_requires_target(self, pending_advance, accountant, password, user, make_invoice):
        make_invoice(user, advance=pending_advance)

        with pytest.raises(InvalidDeleteStrategyError):
            delete_advance(
                advance_id=pending_advance.id,
                actor=accountant,
                password=password,
                strategy=REASSIGN_INVOICES,
            )

    def test_reassign_to_same_advance(self, pending_advance, accountant, password, user, make_invoice):
        make_invoice(user, advance=pending_advance)

        with pytest.raises(InvalidDeleteStrategyError):
            delete_advance(
                advance_id=pending_advance.id,
                actor=accountant,
                password=password,
                strategy=REASSIGN_INVOICES,
                target_advance_id=pending_advance.id,
            )

    def test_reassign_moves_invoices(
        self, pending_advance, other_advance, accountant, password, user, make_invoice
    ):
        invoice = make_invoice(user, advance=pending_advance)

        summary = delete_advance(
            advance_id=pending_advance.id,
            actor=accountant,
            password=password,
            strategy=REASSIGN_INVOICES,
            target_advance_id=other_advance.id,
        )

        assert summary['reassigned_invoices'] == 1
        invoice.refresh_from_db()
        assert invoice.advance_id == other_advance.id


# =============================================================================
# Queries
# =============================================================================

@pytest.mark.django_db
class TestQueries:

    def test_list_filters_and_pages(self, pending_advance, other_advance):
        items, next_offset = list_advances(limit=1)

        assert len(items) == 1
        assert next_offset == 1

        items, next_offset = list_advances(search='supplies')
        assert items == [other_advance]
        assert next_offset is None

    def test_detail(self, pending_advance, other_advance, user, make_invoice):
        invoice = make_invoice(user, advance=other_advance)

        detail = get_advance_detail(advance_id=other_advance.id)

        assert detail['advance'] == other_advance
        assert detail['invoices'] == [invoice]
        assert detail['previous_advance'] == pending_advance
        assert detail['budget_request'] is None
