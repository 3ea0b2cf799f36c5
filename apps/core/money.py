"""Money and workflow-constant helpers shared by the service layers."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.conf import settings

from .exceptions import BadRequestError

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def expenses_setting(key):
    """Read one of the workflow constants from ``settings.EXPENSES``."""
    return settings.EXPENSES[key]


def to_amount(value, *, allow_zero=False, allow_negative=False) -> Decimal:
    """
    Coerce ``value`` to a 2dp Decimal.

    Raises:
        BadRequestError: not a number, more than two decimal places, or the
            sign is not permitted by the flags.
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise BadRequestError("Amount must be a number")

    if not amount.is_finite():
        raise BadRequestError("Amount must be a number")
    # Magnitude first: quantize overflows the context precision on huge values
    if amount.copy_abs() > expenses_setting('MAX_AMOUNT'):
        raise BadRequestError("Amount is too large")
    if amount != amount.quantize(CENT, rounding=ROUND_HALF_UP):
        raise BadRequestError("Amount can have at most two decimal places")
    if amount == ZERO and not allow_zero:
        raise BadRequestError("Amount must not be zero")
    if amount < ZERO and not allow_negative:
        raise BadRequestError("Amount must be greater than zero")

    return amount.quantize(CENT)


def require_text(value, *, field, min_length, max_length=None) -> str:
    """Strip ``value`` and check its length bounds."""
    text = (value or '').strip()
    if len(text) < min_length:
        raise BadRequestError(f"{field} must be at least {min_length} characters long")
    if max_length is not None and len(text) > max_length:
        raise BadRequestError(f"{field} cannot exceed {max_length} characters")
    return text
