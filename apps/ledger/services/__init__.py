"""
Ledger app services layer.

Every balance mutation in the project goes through ``apply_balance_change``.
"""

from .exceptions import LedgerUserNotFoundError, LedgerAccessDeniedError
from .balance import apply_balance_change, adjust_balance
from .queries import (
    get_balance,
    get_history,
    ensure_history_access,
    list_user_balances,
    get_balance_stats,
    replay_balance,
    verify_ledger,
)

__all__ = [
    # Exceptions
    'LedgerUserNotFoundError',
    'LedgerAccessDeniedError',
    # Mutations
    'apply_balance_change',
    'adjust_balance',
    # Queries
    'get_balance',
    'get_history',
    'ensure_history_access',
    'list_user_balances',
    'get_balance_stats',
    'replay_balance',
    'verify_ledger',
]
