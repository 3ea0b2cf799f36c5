"""Domain-specific exceptions for advances app."""

from apps.core.exceptions import BadRequestError, ConflictError, NotFoundError


class AdvanceNotFoundError(NotFoundError):
    """Raised when an advance does not exist."""
    default_detail = 'Advance not found.'


class AdvanceUserNotFoundError(NotFoundError):
    """Raised when the advance recipient does not exist."""
    default_detail = 'User not found.'


class AdvanceAlreadyProcessedError(ConflictError):
    """Raised when the advance was already transitioned by someone else."""
    default_detail = 'This advance was already processed by someone else. Refresh and try again.'


class AdvanceNotTransferredError(ConflictError):
    """Raised when settling an advance that was never transferred."""
    default_detail = 'Only transferred advances can be settled.'


class DuplicateAdvanceError(ConflictError):
    """Raised when a budget request already spawned an advance."""
    default_detail = 'An advance for this budget request already exists.'


class InvalidDeleteStrategyError(BadRequestError):
    """Raised when the delete strategy or its target is invalid."""
    default_detail = 'Invalid delete strategy.'
