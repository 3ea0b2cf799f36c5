"""
Domain-specific exceptions for invoices app.

Covers the invoice lifecycle and the deletion-request workflow.
"""

from apps.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError


class InvoiceNotFoundError(NotFoundError):
    """Raised when an invoice does not exist."""
    default_detail = 'Invoice not found.'


class InvoiceAccessDeniedError(ForbiddenError):
    """Raised when a regular user touches someone else's invoice."""
    default_detail = 'You can only manage your own invoices.'


class InvoiceValidationError(BadRequestError):
    """Raised when invoice input is invalid."""
    default_detail = 'Invalid invoice data.'


class InvoiceStateConflictError(ConflictError):
    """Raised when the invoice is no longer in the state the action requires."""
    default_detail = 'This invoice was already processed by someone else. Refresh and try again.'


class InvoiceClaimedError(ConflictError):
    """Raised when another reviewer holds the invoice."""
    default_detail = 'This invoice is being reviewed by someone else.'


class SettledInvoiceError(ConflictError):
    """Raised when a settled invoice would be modified."""
    default_detail = 'Settled invoices cannot be modified.'


class DeletionRequestNotFoundError(NotFoundError):
    """Raised when a deletion request does not exist."""
    default_detail = 'Deletion request not found.'


class DuplicateDeletionRequestError(ConflictError):
    """Raised when the invoice already has a pending deletion request."""
    default_detail = 'A deletion request for this invoice is already pending.'


class DeletionRequestAlreadyReviewedError(ConflictError):
    """Raised when the deletion request was already reviewed."""
    default_detail = 'This deletion request was already reviewed by someone else. Refresh and try again.'
