"""
Advances app services layer.

Lifecycle of money disbursed to users: manual or budget-request creation,
transfer (balance credit), settlement (invoice cascade) and deletion.
"""

from .exceptions import (
    AdvanceNotFoundError,
    AdvanceUserNotFoundError,
    AdvanceAlreadyProcessedError,
    AdvanceNotTransferredError,
    DuplicateAdvanceError,
    InvalidDeleteStrategyError,
)
from .advance_workflow import (
    create_manual,
    create_for_budget_request,
    transfer,
    settle,
)
from .advance_removal import (
    DELETE_STRATEGIES,
    DELETE_WITH_INVOICES,
    REASSIGN_INVOICES,
    delete_advance,
)
from .queries import list_advances, get_advance_detail

__all__ = [
    # Exceptions
    'AdvanceNotFoundError',
    'AdvanceUserNotFoundError',
    'AdvanceAlreadyProcessedError',
    'AdvanceNotTransferredError',
    'DuplicateAdvanceError',
    'InvalidDeleteStrategyError',

    # Workflow
    'create_manual',
    'create_for_budget_request',
    'transfer',
    'settle',

    # Removal
    'DELETE_STRATEGIES',
    'DELETE_WITH_INVOICES',
    'REASSIGN_INVOICES',
    'delete_advance',

    # Queries
    'list_advances',
    'get_advance_detail',
]
