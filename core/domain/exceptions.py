"""
Domain exceptions.

Every failure that crosses a layer boundary is reduced to one of these.
The API layer maps them to HTTP responses; management commands print
their messages.
"""
from typing import Any, Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ConfigurationError(DomainException):
    """Raised when required configuration is missing at startup."""

    def __init__(self, message: str = "Missing remote service configuration"):
        super().__init__(message, code="CONFIGURATION_ERROR")


class RemoteServiceError(DomainException):
    """Raised when the remote service rejects or fails a request."""

    def __init__(
        self,
        message: str = "Remote service request failed",
        details: Optional[Any] = None,
        code: str = "REMOTE_SERVICE_ERROR",
    ):
        super().__init__(message, code=code)
        self.details = details


class RowNotFoundError(RemoteServiceError):
    """Raised when a row addressed by id does not exist."""

    def __init__(self, table: str, row_id: str):
        super().__init__(f"No row {row_id} in {table}", code="ROW_NOT_FOUND")
        self.table = table
        self.row_id = row_id


class InvalidQueryError(DomainException):
    """Raised when a table query configuration is malformed."""

    def __init__(self, message: str = "Invalid table query"):
        super().__init__(message, code="INVALID_QUERY")


class AuthenticationError(DomainException):
    """Raised when credentials or an access token are rejected."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="AUTHENTICATION_FAILED")


class PermissionDeniedError(DomainException):
    """Raised when an authenticated actor lacks a privileged role."""

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message, code="PERMISSION_DENIED")


class InvalidTransitionError(DomainException):
    """Raised when an order cannot move to the requested status."""

    def __init__(self, message: str = "Invalid order status transition"):
        super().__init__(message, code="INVALID_TRANSITION")


class InsufficientStockError(DomainException):
    """Raised when a stock adjustment would drive stock below zero."""

    def __init__(self, message: str = "Insufficient stock"):
        super().__init__(message, code="INSUFFICIENT_STOCK")
