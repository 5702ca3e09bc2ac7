"""
Exception hierarchy for the user portal.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging, and
carry the HTTP status the API layer reports for them.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class PortalError(Exception):
    """Base exception for all user portal errors."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ValidationError(PortalError):
    """Raised when input fails a business rule."""

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


class AuthenticationError(PortalError):
    """Raised when credentials, codes or tokens are rejected."""

    status_code = 401


class PermissionDeniedError(PortalError):
    """Raised when an authenticated caller may not perform an operation."""

    status_code = 403


class NotFoundError(PortalError):
    """Raised when a directory entry or record does not exist."""

    status_code = 404

    def __init__(
        self,
        message: str,
        identifier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if identifier:
            details["identifier"] = identifier
        super().__init__(message, details)


class ConflictError(PortalError):
    """Raised when a unique value (username, MAC, CI) is already taken."""

    status_code = 409


class DirectoryError(PortalError):
    """Raised when an LDAP operation fails."""

    status_code = 502

    def __init__(
        self,
        message: str,
        result_code: int | None = None,
        transient: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize directory error.

        Args:
            message: Error message
            result_code: LDAP result code returned by the server
            transient: True when the failure is a lost or refused connection
            details: Additional context
        """
        details = details or {}
        if result_code is not None:
            details["result_code"] = result_code
        self.result_code = result_code
        self.transient = transient
        super().__init__(message, details)


class UpstreamServiceError(PortalError):
    """Raised when SIGENU or the mail relay fails."""

    def __init__(
        self,
        message: str,
        service: str,
        unavailable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            message: Error message
            service: Name of the upstream system
            unavailable: True when the service is down or over its quota (503)
            details: Additional context
        """
        details = details or {}
        details["service"] = service
        self.service = service
        self.unavailable = unavailable
        super().__init__(message, details)

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return 503 if self.unavailable else 502
