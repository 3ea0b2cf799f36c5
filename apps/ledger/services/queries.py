"""Read side of the ledger: balances, history, statistics and verification."""

from decimal import Decimal
from typing import List
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, Q, Sum

from apps.accounts.models import UserRole
from apps.core.money import CENT, ZERO
from apps.ledger.models import LedgerTransaction

from .exceptions import LedgerUserNotFoundError, LedgerAccessDeniedError

User = get_user_model()


def _get_user(user_id: UUID) -> User:
    try:
        return User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise LedgerUserNotFoundError(f"User {user_id} not found")


def get_balance(*, user_id: UUID) -> Decimal:
    return _get_user(user_id).balance


def get_history(*, user_id: UUID, limit: int = 50, offset: int = 0) -> List[LedgerTransaction]:
    """Ledger rows of one user, newest first."""
    _get_user(user_id)
    return list(
        LedgerTransaction.objects
        .filter(user_id=user_id)
        .select_related('created_by')
        .order_by('-sequence')[offset:offset + limit]
    )


def ensure_history_access(*, viewer: User, user_id: UUID) -> None:
    """Regular users may only read their own history."""
    if not viewer.is_accountant and viewer.id != user_id:
        raise LedgerAccessDeniedError()


def list_user_balances():
    """Regular users with their balances, for the accountant overview."""
    return User.objects.filter(role=UserRole.USER).order_by('email')


def get_balance_stats() -> dict:
    """Aggregates over the balances of every regular user."""
    stats = User.objects.filter(role=UserRole.USER).aggregate(
        user_count=Count('id'),
        total=Sum('balance'),
        average=Avg('balance'),
        positive=Count('id', filter=Q(balance__gt=0)),
        negative=Count('id', filter=Q(balance__lt=0)),
        zero=Count('id', filter=Q(balance=0)),
    )
    return {
        'user_count': stats['user_count'],
        'total_balance': (stats['total'] or ZERO).quantize(CENT),
        'average_balance': Decimal(stats['average'] or 0).quantize(CENT),
        'positive_count': stats['positive'],
        'negative_count': stats['negative'],
        'zero_count': stats['zero'],
    }


def replay_balance(*, user_id: UUID) -> Decimal:
    """Fold the user's ledger from zero in write order."""
    amounts = (
        LedgerTransaction.objects
        .filter(user_id=user_id)
        .order_by('sequence')
        .values_list('amount', flat=True)
    )
    return sum(amounts, ZERO)


def verify_ledger(*, user_id: UUID) -> bool:
    """
    Check the ledger of one user against the stored balance.

    Every row must satisfy ``balance_after = balance_before + amount``, each
    row must start where the previous one ended (the first at zero), and the
    last row must end at the current balance.
    """
    user = _get_user(user_id)
    running = ZERO
    for entry in LedgerTransaction.objects.filter(user_id=user_id).order_by('sequence'):
        if entry.balance_before != running:
            return False
        if entry.balance_after != entry.balance_before + entry.amount:
            return False
        running = entry.balance_after
    return running == user.balance
