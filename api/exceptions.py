"""
API exception handlers.

Domain exceptions and DRF exceptions are rendered as
``{"error": {"code": ..., "message": ...}}`` with the request's trace id
echoed in ``X-Trace-ID``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DomainException,
    PermissionDeniedError,
    RemoteServiceError,
    RowNotFoundError,
)
from core.metrics import errors_total
from core.middleware.metrics import normalize_endpoint

logger = logging.getLogger(__name__)

# Checked in order; RowNotFoundError must precede its base RemoteServiceError.
DOMAIN_STATUS_CODES = (
    (RowNotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (RemoteServiceError, status.HTTP_502_BAD_GATEWAY),
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


class APIError(APIException):
    """Base API exception with error code."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "An error occurred"
    default_code = "api_error"

    def __init__(self, detail=None, code=None, status_code=None):
        """
        Initialize API error.

        Args:
            detail: Error message
            code: Error code
            status_code: HTTP status code
        """
        if status_code:
            self.status_code = status_code
        if code:
            self.default_code = code
        super().__init__(detail)


def error_body(code: str, message: Any) -> Dict[str, Any]:
    return {"error": {"code": code, "message": message}}


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        code = exc.code
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = getattr(exc, "default_code", "api_error").upper().replace("-", "_")
        detail = response.data
        if isinstance(detail, dict):
            detail = detail.get("detail", exc.default_detail)
        response.data = error_body(code, detail)
    elif isinstance(exc, Http404):
        code = "NOT_FOUND"
        response = Response(
            error_body(code, "Resource not found"), status=status.HTTP_404_NOT_FOUND
        )
    else:
        logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
        code = "INTERNAL_ERROR"
        response = Response(
            error_body(code, "An internal error occurred"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    errors_total.labels(error_type=code, endpoint=_endpoint(context)).inc()
    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _endpoint(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return normalize_endpoint(request.path) if request is not None else "unknown"


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Map a domain exception to its HTTP status; anything unlisted is a 400."""
    status_code = next(
        (code for exc_type, code in DOMAIN_STATUS_CODES if isinstance(exc, exc_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    log = logger.error if status_code >= 500 else logger.warning
    log("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    return Response(error_body(exc.code, exc.message), status=status_code)
