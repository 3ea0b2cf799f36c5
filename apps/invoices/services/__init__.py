"""
Invoices app services layer.

Invoice lifecycle (submission, review, settlement linkage, edits, admin
deletion) and the deletion-request workflow.
"""

from .exceptions import (
    InvoiceNotFoundError,
    InvoiceAccessDeniedError,
    InvoiceValidationError,
    InvoiceStateConflictError,
    InvoiceClaimedError,
    SettledInvoiceError,
    DeletionRequestNotFoundError,
    DuplicateDeletionRequestError,
    DeletionRequestAlreadyReviewedError,
)
from .balance_effects import charge_new_invoice, refund_deleted_invoice
from .submission import create_invoice, upload_invoice
from .review import (
    claim_for_review,
    review_heartbeat,
    release_review,
    finalize_review,
    mark_transferred,
)
from .settlement import settle_linked_invoices
from .management import update_invoice_data, remove_invoice, delete_invoice
from .deletion_requests import (
    create_deletion_request,
    review_deletion_request,
    cancel_deletion_request,
    list_deletion_requests,
    list_own_deletion_requests,
)
from .queries import (
    list_own_invoices,
    list_invoices,
    get_invoice_detail,
    get_invoice_edit_history,
)

__all__ = [
    # Exceptions
    'InvoiceNotFoundError',
    'InvoiceAccessDeniedError',
    'InvoiceValidationError',
    'InvoiceStateConflictError',
    'InvoiceClaimedError',
    'SettledInvoiceError',
    'DeletionRequestNotFoundError',
    'DuplicateDeletionRequestError',
    'DeletionRequestAlreadyReviewedError',

    # Balance effects
    'charge_new_invoice',
    'refund_deleted_invoice',

    # Lifecycle
    'create_invoice',
    'upload_invoice',
    'claim_for_review',
    'review_heartbeat',
    'release_review',
    'finalize_review',
    'mark_transferred',
    'settle_linked_invoices',
    'update_invoice_data',
    'remove_invoice',
    'delete_invoice',

    # Deletion requests
    'create_deletion_request',
    'review_deletion_request',
    'cancel_deletion_request',
    'list_deletion_requests',
    'list_own_deletion_requests',

    # Queries
    'list_own_invoices',
    'list_invoices',
    'get_invoice_detail',
    'get_invoice_edit_history',
]
