"""
Two-factor validation utilities.

Business logic validation not covered by Pydantic models.

Dependencies: user_portal.models.security
System role: 2FA request validation
"""

from user_portal.core.security import TokenUser
from user_portal.models.security import ActivateTwoFactorRequest


class TwoFactorValidationError(ValueError):
    """Raised when 2FA validation fails."""


def validate_activation(request: ActivateTwoFactorRequest, current_user: TokenUser) -> tuple[str, str]:
    """
    Validate an activation request.

    Args:
        request: ActivateTwoFactorRequest with sAMAccountName and secret
        current_user: Token holder

    Returns:
        tuple[str, str]: (sAMAccountName, secret)

    Raises:
        TwoFactorValidationError: A field is missing or names another user
    """
    sam = (request.sAMAccountName or "").strip()
    secret = (request.secret or "").strip()
    if not sam or not secret:
        raise TwoFactorValidationError("sAMAccountName y secret son requeridos")
    if sam.lower() != current_user.sAMAccountName.lower():
        raise TwoFactorValidationError("Solo puede activar 2FA en su propia cuenta")
    return sam, secret
