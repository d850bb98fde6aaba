"""
API exception handlers.

This module provides custom exception handling for REST API responses.
"""

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthError,
    DomainException,
    DuplicateKeyError,
    InternalError,
    LicenseRejectedError,
    NotFoundError,
    ValidationError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"

_STATUS_BY_EXCEPTION = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (LicenseRejectedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateKeyError, status.HTTP_409_CONFLICT),
    (InternalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def error_body(code: str, message: str, **extra: Any) -> Dict[str, Any]:
    """Build the uniform error payload."""
    body = {"success": False, "error": {"code": code, "message": message}}
    body.update(extra)
    return body


def validation_error_response(errors: Dict[str, Any]) -> Response:
    """Response for serializer errors, before any store access."""
    body = error_body("VALIDATION_ERROR", "Invalid request")
    body["error"]["fields"] = errors
    return Response(body, status=status.HTTP_400_BAD_REQUEST)


def status_for(exc: DomainException) -> int:
    """Return the HTTP status for a domain exception."""
    for exc_class, status_code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _show_internal_detail() -> bool:
    return getattr(settings, "ENVIRONMENT", "production") == "development"


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    correlation_id = _get_correlation_id(context)

    if isinstance(exc, DomainException):
        return _handle_domain_exception(exc, context, correlation_id)

    if isinstance(exc, APIException):
        response = exception_handler(exc, context)
        if response is not None:
            code = (
                exc.default_code.upper().replace("-", "_")
                if hasattr(exc, "default_code")
                else "API_ERROR"
            )
            detail = response.data.get("detail", exc.default_detail) if isinstance(response.data, dict) else exc.default_detail
            response.data = error_body(code, str(detail))
            return response

    if isinstance(exc, Http404):
        return Response(error_body("NOT_FOUND", "Resource not found"), status=status.HTTP_404_NOT_FOUND)

    return _handle_unexpected_exception(exc, context, correlation_id)


def _get_correlation_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract correlation ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "correlation_id", None)


def _endpoint(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return getattr(request, "path", "") if request else ""


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], correlation_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for(exc)
    errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()

    if isinstance(exc, InternalError):
        logger.error(
            "Internal error: %s",
            exc.message,
            extra={"correlation_id": correlation_id},
            exc_info=exc,
        )
        message = exc.message if _show_internal_detail() else GENERIC_ERROR_MESSAGE
        return Response(error_body(exc.code, message), status=status_code)

    logger.warning(
        "Domain exception: %s - %s", exc.code, exc.message, extra={"correlation_id": correlation_id}
    )
    extra = {}
    if isinstance(exc, LicenseRejectedError) and exc.machine_id:
        extra["machine_id"] = exc.machine_id
    return Response(error_body(exc.code, exc.message, **extra), status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], correlation_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error(
        "Unexpected error: %s", exc, extra={"correlation_id": correlation_id}, exc_info=exc
    )
    errors_total.labels(error_type=type(exc).__name__, endpoint=_endpoint(context)).inc()
    message = str(exc) if _show_internal_detail() else GENERIC_ERROR_MESSAGE
    return Response(
        error_body("INTERNAL_ERROR", message),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
