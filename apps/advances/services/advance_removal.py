"""
Advance deletion.

Linked invoices are either deleted (with their deductions refunded) or moved
to another advance. A credit that already reached the balance is reversed.
"""

import logging
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction

from apps.accounts.services import verify_password
from apps.advances.models import Advance, AdvanceStatus
from apps.invoices.models import Invoice
from apps.invoices.services import remove_invoice
from apps.ledger.models import TransactionType
from apps.ledger.services import apply_balance_change

from .exceptions import (
    AdvanceNotFoundError,
    AdvanceAlreadyProcessedError,
    InvalidDeleteStrategyError,
)

logger = logging.getLogger(__name__)

User = get_user_model()

DELETE_WITH_INVOICES = 'delete_with_invoices'
REASSIGN_INVOICES = 'reassign_invoices'
DELETE_STRATEGIES = (DELETE_WITH_INVOICES, REASSIGN_INVOICES)


def delete_advance(
    *,
    advance_id: UUID,
    actor: User,
    password: str,
    strategy: str,
    target_advance_id: Optional[UUID] = None,
) -> dict:
    """
    Delete an advance.

    Returns a summary with the number of invoices deleted or reassigned and
    whether the balance credit was reversed.

    Raises:
        InvalidPasswordError: password re-verification failed
        InvalidDeleteStrategyError: unknown strategy, missing or identical target
        AdvanceNotFoundError: advance or target advance doesn't exist
        AdvanceAlreadyProcessedError: advance changed while being deleted
    """
    verify_password(user=actor, password=password)

    if strategy not in DELETE_STRATEGIES:
        raise InvalidDeleteStrategyError(f"Unknown strategy: {strategy}")

    try:
        advance = Advance.objects.get(id=advance_id)
    except Advance.DoesNotExist:
        raise AdvanceNotFoundError(f"Advance {advance_id} not found")

    has_invoices = Invoice.objects.filter(advance_id=advance.id).exists()
    if strategy == REASSIGN_INVOICES and has_invoices:
        if not target_advance_id:
            raise InvalidDeleteStrategyError("A target advance is required to reassign invoices")
        if target_advance_id == advance.id:
            raise InvalidDeleteStrategyError("Invoices cannot be reassigned to the same advance")
        if not Advance.objects.filter(id=target_advance_id).exists():
            raise AdvanceNotFoundError(f"Target advance {target_advance_id} not found")

    deleted_invoices = 0
    reassigned_invoices = 0
    with transaction.atomic():
        invoices = list(Invoice.objects.select_for_update().filter(advance_id=advance.id))

        if strategy == DELETE_WITH_INVOICES:
            for invoice in invoices:
                remove_invoice(
                    invoice=invoice,
                    actor=actor,
                    notes=f"Refund for invoice {invoice.invoice_number} (advance deleted)",
                )
            deleted_invoices = len(invoices)
        elif invoices:
            reassigned_invoices = Invoice.objects.filter(
                advance_id=advance.id
            ).update(advance_id=target_advance_id)

        credit_reversed = advance.status in (AdvanceStatus.TRANSFERRED, AdvanceStatus.SETTLED)
        if credit_reversed:
            apply_balance_change(
                user_id=advance.user_id,
                amount=-advance.amount,
                transaction_type=TransactionType.ADJUSTMENT,
                reference_id=advance.id,
                notes="Reversal of deleted advance",
                created_by=actor,
            )

        # Status guard: a concurrent transfer changes whether a reversal is due
        deleted, _ = Advance.objects.filter(id=advance.id, status=advance.status).delete()
        if not deleted:
            logger.warning("Advance %s changed while being deleted", advance.id)
            raise AdvanceAlreadyProcessedError()

    logger.info(
        "Advance %s deleted by %s (%s, %d deleted, %d reassigned)",
        advance.id, actor.id, strategy, deleted_invoices, reassigned_invoices,
    )
    return {
        'deleted_invoices': deleted_invoices,
        'reassigned_invoices': reassigned_invoices,
        'credit_reversed': credit_reversed,
    }
