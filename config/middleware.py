import logging
from urllib.parse import urlsplit

from django.conf import settings
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

UNSAFE_METHODS = ('POST', 'PUT', 'PATCH', 'DELETE')


class OriginCheckMiddleware(MiddlewareMixin):
    """
    Reject cross-origin mutations on the API.

    Bearer-token requests bypass Django's CSRF middleware, so every unsafe
    request under /api/ carrying an Origin header must come from the host
    that serves the API or from one of CSRF_TRUSTED_ORIGINS.
    """

    def process_request(self, request):
        if request.method not in UNSAFE_METHODS or not request.path.startswith('/api/'):
            return None

        origin = request.META.get('HTTP_ORIGIN')
        if not origin:
            return None

        if origin in getattr(settings, 'CSRF_TRUSTED_ORIGINS', []):
            return None

        origin_host = urlsplit(origin).netloc
        if origin_host and origin_host == request.get_host():
            return None

        logger.warning(
            "Rejected cross-origin %s %s from %s", request.method, request.path, origin
        )
        return JsonResponse({
            'success': False,
            'error': 'forbidden_origin',
            'message': 'Cross-origin request rejected',
        }, status=403)
