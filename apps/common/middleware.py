"""
Middleware for request logging and API error handling
"""

import logging
import time
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(MiddlewareMixin):
    """
    Error handling middleware that prevents information leakage on API paths
    """

    def process_exception(self, request, exception):
        # Log the actual exception for debugging
        logger.error(f"Exception in {request.path}: {str(exception)}", exc_info=True)

        # Return generic error response without exposing internal details
        if request.path.startswith('/api/'):
            error_response = {
                'code': 500,
                'msg': 'Internal server error, please try again later',
                'data': None
            }
            return JsonResponse(error_response, status=500)

        return None  # Let Django handle non-API errors normally


class RequestLoggingMiddleware(MiddlewareMixin):
    """
    Log method, path, status and duration of API requests
    """

    def process_request(self, request):
        request._started_at = time.monotonic()

    def process_response(self, request, response):
        started_at = getattr(request, '_started_at', None)
        if started_at is not None and request.path.startswith('/api/'):
            duration_ms = (time.monotonic() - started_at) * 1000
            level = logging.WARNING if response.status_code >= 500 else logging.DEBUG
            logger.log(
                level,
                f"{request.method} {request.path} -> {response.status_code} ({duration_ms:.1f}ms)"
            )
        return response
