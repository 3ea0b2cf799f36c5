"""
Balance ledger service.

``User.balance`` is written in exactly one place, ``apply_balance_change``,
and always together with the ledger row describing the change.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Max

from apps.core.money import CENT, expenses_setting, require_text, to_amount
from apps.ledger.models import LedgerTransaction, TransactionType
from apps.notifications.services import send_safely, notify_balance_adjusted

from .exceptions import LedgerUserNotFoundError

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def apply_balance_change(
    *,
    user_id: UUID,
    amount: Decimal,
    transaction_type: str,
    reference_id: Optional[UUID] = None,
    notes: str = '',
    created_by: Optional[User] = None,
) -> LedgerTransaction:
    """
    Add ``amount`` (signed) to the user's balance and record it.

    The user row is locked for the duration of the surrounding transaction,
    so concurrent changes to one balance are serialized. Any failure rolls
    back both the balance and the ledger row.

    Raises:
        LedgerUserNotFoundError: If user doesn't exist
    """
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise LedgerUserNotFoundError(f"User {user_id} not found")

    amount = Decimal(amount).quantize(CENT)
    balance_before = user.balance
    balance_after = balance_before + amount

    User.objects.filter(id=user.id).update(balance=balance_after)

    last_sequence = (
        LedgerTransaction.objects
        .filter(user_id=user.id)
        .aggregate(last=Max('sequence'))['last']
    ) or 0

    entry = LedgerTransaction.objects.create(
        user_id=user.id,
        sequence=last_sequence + 1,
        amount=amount,
        balance_before=balance_before,
        balance_after=balance_after,
        transaction_type=transaction_type,
        reference_id=reference_id,
        notes=notes,
        created_by=created_by,
    )

    logger.info(
        "Balance of user %s changed by %s (%s): %s -> %s",
        user.id, amount, transaction_type, balance_before, balance_after,
    )
    return entry


def adjust_balance(
    *,
    user_id: UUID,
    amount,
    notes: str,
    adjusted_by: User
) -> LedgerTransaction:
    """
    Manual correction of a balance by an accountant.

    Raises:
        BadRequestError: amount is zero or notes are out of bounds
        LedgerUserNotFoundError: If user doesn't exist
    """
    amount = to_amount(amount, allow_negative=True)
    notes = require_text(
        notes,
        field='Notes',
        min_length=expenses_setting('ADJUSTMENT_NOTES_MIN_LENGTH'),
        max_length=expenses_setting('ADJUSTMENT_NOTES_MAX_LENGTH'),
    )

    with transaction.atomic():
        entry = apply_balance_change(
            user_id=user_id,
            amount=amount,
            transaction_type=TransactionType.ADJUSTMENT,
            notes=notes,
            created_by=adjusted_by,
        )
        send_safely(
            notify_balance_adjusted,
            user_id=entry.user_id,
            amount=entry.amount,
            balance_after=entry.balance_after,
            notes=notes,
        )

    return entry
