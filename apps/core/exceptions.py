"""
Error kinds shared by every workflow app.

Each app subclasses these in its own ``services/exceptions.py`` so that a
service can raise a precise error (``BudgetRequestNotFoundError``) while the
API still renders the generic kind (``not_found``, HTTP 404).

Exception Hierarchy:
    ServiceError (APIException)
    ├── NotFoundError       404
    ├── ForbiddenError      403
    ├── BadRequestError     400
    ├── ConflictError       409
    ├── UnauthorizedError   401
    └── InternalError       500

Usage:
    from apps.core.exceptions import ConflictError

    class AlreadyReviewedError(ConflictError):
        default_detail = 'Request was already processed by someone else.'
"""
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(exceptions.APIException):
    """Base class for all workflow errors raised by services."""
    status_code = 500
    default_detail = 'Service error.'
    default_code = 'service_error'


class NotFoundError(ServiceError):
    """Referenced entity does not exist."""
    status_code = 404
    default_detail = 'Not found.'
    default_code = 'not_found'


class ForbiddenError(ServiceError):
    """Principal lacks the role or company permission for the action."""
    status_code = 403
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'


class BadRequestError(ServiceError):
    """Input failed validation."""
    status_code = 400
    default_detail = 'Invalid input.'
    default_code = 'bad_request'


class ConflictError(ServiceError):
    """Entity was already transitioned by someone else, or a duplicate would be created."""
    status_code = 409
    default_detail = 'This item was already processed by someone else. Refresh and try again.'
    default_code = 'conflict'


class UnauthorizedError(ServiceError):
    """Password re-verification failed."""
    status_code = 401
    default_detail = 'Invalid password.'
    default_code = 'unauthorized'


class InternalError(ServiceError):
    """Unexpected write failure."""
    status_code = 500
    default_detail = 'Unexpected error while saving data.'
    default_code = 'internal_error'


# DRF's own exceptions mapped onto the service error kinds
_DRF_CODES = (
    (exceptions.PermissionDenied, ForbiddenError.default_code),
    (exceptions.NotAuthenticated, UnauthorizedError.default_code),
    (exceptions.AuthenticationFailed, UnauthorizedError.default_code),
    (exceptions.NotFound, NotFoundError.default_code),
)


def _error_code(exc):
    if isinstance(exc, ServiceError):
        return exc.default_code
    for drf_class, code in _DRF_CODES:
        if isinstance(exc, drf_class):
            return code
    codes = exc.get_codes()
    if isinstance(codes, str):
        return codes
    if isinstance(exc, exceptions.ValidationError):
        return 'bad_request'
    return getattr(exc, 'default_code', 'error')


def api_exception_handler(exc, context):
    """
    Render every API failure as ``{success, error, message}``.

    Validation errors keep their field messages under ``details``.
    Exceptions DRF does not know about fall through to Django's 500 handler.
    """
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        payload = {
            'success': False,
            'error': 'bad_request',
            'message': 'Invalid input.',
            'details': response.data,
        }
    else:
        detail = response.data.get('detail', '') if isinstance(response.data, dict) else response.data
        payload = {
            'success': False,
            'error': _error_code(exc),
            'message': str(detail),
        }

    if response.status_code >= 500:
        logger.error("API error %s: %s", payload['error'], payload['message'])

    response.data = payload
    return response
