"""
Advance workflow service.

pending -> transferred -> settled. The user's balance is credited on
transfer, in the same transaction as the status change.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.advances.models import Advance, AdvanceStatus, AdvanceSource
from apps.companies.models import Company
from apps.companies.services import CompanyNotFoundError
from apps.core.money import expenses_setting, require_text, to_amount
from apps.invoices.models import InvoiceStatus
from apps.invoices.services import settle_linked_invoices
from apps.ledger.models import TransactionType
from apps.ledger.services import apply_balance_change
from apps.notifications.services import (
    send_safely,
    notify_advance_transferred,
    notify_advance_settled,
)

from .exceptions import (
    AdvanceNotFoundError,
    AdvanceUserNotFoundError,
    AdvanceAlreadyProcessedError,
    AdvanceNotTransferredError,
    DuplicateAdvanceError,
)

logger = logging.getLogger(__name__)

User = get_user_model()


def _get_advance(advance_id: UUID) -> Advance:
    try:
        return Advance.objects.get(id=advance_id)
    except Advance.DoesNotExist:
        raise AdvanceNotFoundError(f"Advance {advance_id} not found")


def create_manual(
    *,
    creator: User,
    user_id: UUID,
    company_id: UUID,
    amount,
    description: str
) -> Advance:
    """
    Accountant-created advance, waiting for transfer.

    Raises:
        BadRequestError: invalid amount or description
        AdvanceUserNotFoundError: recipient doesn't exist
        CompanyNotFoundError: company doesn't exist
    """
    amount = to_amount(amount)
    description = require_text(
        description,
        field='Description',
        min_length=expenses_setting('ADVANCE_DESCRIPTION_MIN_LENGTH'),
        max_length=expenses_setting('ADVANCE_DESCRIPTION_MAX_LENGTH'),
    )

    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise AdvanceUserNotFoundError(f"User {user_id} not found")
    try:
        company = Company.objects.get(id=company_id)
    except Company.DoesNotExist:
        raise CompanyNotFoundError(f"Company {company_id} not found")

    advance = Advance.objects.create(
        user=user,
        company=company,
        amount=amount,
        description=description,
        status=AdvanceStatus.PENDING,
        source_type=AdvanceSource.MANUAL,
        created_by=creator,
    )
    logger.info("Advance %s (%s) created for %s by %s", advance.id, amount, user.id, creator.id)
    return advance


def create_for_budget_request(*, budget_request, created_by: User) -> Advance:
    """
    Spawn the pending advance of an approved budget request.

    Runs inside the approving transaction.

    Raises:
        DuplicateAdvanceError: the request already has an advance
    """
    max_length = expenses_setting('ADVANCE_DESCRIPTION_MAX_LENGTH')
    try:
        with transaction.atomic():
            advance = Advance.objects.create(
                user_id=budget_request.user_id,
                company_id=budget_request.company_id,
                amount=budget_request.requested_amount,
                description=budget_request.justification[:max_length],
                status=AdvanceStatus.PENDING,
                source_type=AdvanceSource.BUDGET_REQUEST,
                source_id=budget_request.id,
                created_by=created_by,
            )
    except IntegrityError:
        raise DuplicateAdvanceError()
    return advance


def transfer(
    *,
    advance_id: UUID,
    confirmer: User,
    transfer_number: Optional[str] = None
) -> Advance:
    """
    Credit the advance to the user's balance and mark it transferred.

    The ledger entry and the status change commit together or not at all.

    Raises:
        AdvanceNotFoundError: advance doesn't exist
        AdvanceAlreadyProcessedError: advance is no longer pending
        BadRequestError: transfer number out of bounds
    """
    if transfer_number:
        transfer_number = require_text(
            transfer_number,
            field='Transfer number',
            min_length=expenses_setting('TRANSFER_NUMBER_MIN_LENGTH'),
            max_length=expenses_setting('TRANSFER_NUMBER_MAX_LENGTH'),
        )

    advance = _get_advance(advance_id)
    if advance.status != AdvanceStatus.PENDING:
        raise AdvanceAlreadyProcessedError()

    with transaction.atomic():
        apply_balance_change(
            user_id=advance.user_id,
            amount=advance.amount,
            transaction_type=TransactionType.ADVANCE_CREDIT,
            reference_id=advance.id,
            notes=f"Advance transfer {transfer_number or ''}".strip(),
            created_by=confirmer,
        )

        now = timezone.now()
        updated = Advance.objects.filter(
            id=advance.id,
            status=AdvanceStatus.PENDING,
        ).update(
            status=AdvanceStatus.TRANSFERRED,
            transfer_number=transfer_number or '',
            transfer_date=now,
            transfer_confirmed_by=confirmer,
            transfer_confirmed_at=now,
            updated_at=now,
        )
        if not updated:
            logger.warning("Advance %s already transferred, credit rolled back", advance.id)
            raise AdvanceAlreadyProcessedError()

        send_safely(
            notify_advance_transferred,
            user_id=advance.user_id,
            amount=advance.amount,
            company_id=advance.company_id,
        )

    logger.info("Advance %s transferred by %s", advance.id, confirmer.id)
    return _get_advance(advance.id)


def settle(*, advance_id: UUID, settler: User) -> Tuple[Advance, List[UUID]]:
    """
    Close a transferred advance and the accepted invoices it funded.

    Returns the advance and the ids of the invoices that were settled.

    Raises:
        AdvanceNotFoundError: advance doesn't exist
        AdvanceNotTransferredError: advance is still pending
        AdvanceAlreadyProcessedError: advance is already settled
    """
    advance = _get_advance(advance_id)
    if advance.status == AdvanceStatus.PENDING:
        raise AdvanceNotTransferredError()
    if advance.status != AdvanceStatus.TRANSFERRED:
        raise AdvanceAlreadyProcessedError()

    with transaction.atomic():
        now = timezone.now()
        updated = Advance.objects.filter(
            id=advance.id,
            status=AdvanceStatus.TRANSFERRED,
        ).update(
            status=AdvanceStatus.SETTLED,
            settled_by=settler,
            settled_at=now,
            updated_at=now,
        )
        if not updated:
            logger.warning("Advance %s already settled", advance.id)
            raise AdvanceAlreadyProcessedError()

        invoice_ids = settle_linked_invoices(
            settled_by=settler,
            advance_id=advance.id,
            statuses=[InvoiceStatus.ACCEPTED],
        )

        send_safely(
            notify_advance_settled,
            user_id=advance.user_id,
            amount=advance.amount,
            invoice_count=len(invoice_ids),
            company_id=advance.company_id,
        )

    logger.info("Advance %s settled by %s with %d invoice(s)", advance.id, settler.id, len(invoice_ids))
    return _get_advance(advance.id), invoice_ids
