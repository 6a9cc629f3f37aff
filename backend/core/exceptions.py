"""
Exception hierarchy for the energy monitoring functions.

Every exception carries the HTTP status its handler answers with, so HTTP
handlers translate errors in one place. All exceptions include context for
observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the functions
"""

from typing import Any


class EnergyMonitorException(Exception):
    """Base exception for all energy monitoring errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message, safe to return to clients
            details: Optional dictionary of additional context for debugging
            status_code: Override of the class-level HTTP status
        """
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(EnergyMonitorException):
    """Raised when request input validation fails."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class TokenValidationError(EnergyMonitorException):
    """Raised when the ID or access token is missing, malformed or expired."""

    status_code = 401


class NotFoundError(EnergyMonitorException):
    """Raised when a route or record does not exist."""

    status_code = 404


class MethodNotAllowedError(EnergyMonitorException):
    """Raised for an HTTP method a function does not serve."""

    status_code = 405


class ConfigurationError(EnergyMonitorException):
    """Raised when required environment configuration is missing."""

    status_code = 500


class AuthServiceError(EnergyMonitorException):
    """Raised when the identity provider rejects an account operation."""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """
        Initialize identity provider error.

        Args:
            message: Client-facing message
            code: Provider error code, e.g. "CodeMismatchException"
            status_code: HTTP status to answer with
        """
        super().__init__(message, {"code": code} if code else None, status_code)
        self.code = code
