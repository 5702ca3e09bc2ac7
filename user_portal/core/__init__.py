"""
Core business logic module.

Contains the exception hierarchy and the framework-free building blocks
the services share: encryption, TOTP, password and PIN policies, token
handling, caches and text normalization.
"""

from user_portal.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DirectoryError,
    NotFoundError,
    PermissionDeniedError,
    PortalError,
    UpstreamServiceError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "ConflictError",
    "DirectoryError",
    "NotFoundError",
    "PermissionDeniedError",
    "PortalError",
    "UpstreamServiceError",
    "ValidationError",
]
