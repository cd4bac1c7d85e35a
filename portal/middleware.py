import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404, JsonResponse

from portal.exceptions import RequestError

logger = logging.getLogger(__name__)


def error_response(status, message, details=None):
    payload = {"detail": message}
    if details:
        payload["details"] = details
    return JsonResponse(payload, status=status)


class ApiExceptionMiddleware:
    """Turn exceptions raised by views into JSON error bodies."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, RequestError):
            return error_response(exception.status, exception.message, exception.details)

        if isinstance(exception, Http404):
            return error_response(404, "Resource not found")

        if isinstance(exception, PermissionDenied):
            return error_response(403, "Insufficient permissions")

        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response(500, "Internal server error")
