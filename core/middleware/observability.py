"""
Request logging with correlation IDs.

One log line per request, carrying the route, the license key from the
path when there is one, and the admin who made the call.
"""

import logging
import time
import uuid
from typing import Any, Dict, Optional

from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class ObservabilityMiddleware(MiddlewareMixin):
    """Assigns a correlation id and logs the outcome of every request."""

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        request.correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex  # type: ignore
        request._started_at = time.perf_counter()  # type: ignore
        return None

    def process_exception(self, request: HttpRequest, exception: Exception) -> None:
        """Log exceptions that escaped the view; Django renders the 500."""
        context = self._request_context(request)
        context["error_type"] = type(exception).__name__
        logger.error("Request raised %s", type(exception).__name__, extra=context, exc_info=exception)
        return None

    def process_response(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        context = self._request_context(request)
        context["status_code"] = response.status_code

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code in (401, 403):
            # Rejected validations and failed admin auth are routine but worth a trace
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, "%s %s -> %s", request.method, request.path, response.status_code, extra=context)

        correlation_id = getattr(request, "correlation_id", None)
        if correlation_id:
            response[CORRELATION_HEADER] = correlation_id
        return response

    def _request_context(self, request: HttpRequest) -> Dict[str, Any]:
        context: Dict[str, Any] = {
            "correlation_id": getattr(request, "correlation_id", None),
            "method": request.method,
            "path": request.path,
            "client_ip": request.META.get("REMOTE_ADDR"),
        }
        started_at = getattr(request, "_started_at", None)
        if started_at is not None:
            context["duration_ms"] = round((time.perf_counter() - started_at) * 1000, 2)

        match = getattr(request, "resolver_match", None)
        if match is not None:
            context["route"] = match.view_name
            if "license_key" in match.kwargs:
                context["license_key"] = match.kwargs["license_key"]

        admin = getattr(request, "admin", None)
        if admin is not None:
            context["admin"] = admin.username
        return context
