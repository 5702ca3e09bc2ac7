"""
Account request validation.

Dependencies: user_portal.core.text
System role: Account request validation
"""

from user_portal.core.text import sanitize_ci


class AccountValidationError(ValueError):
    """Raised when an account request is malformed."""


def validate_passwords_match(password: str, confirm: str | None) -> None:
    """
    Raises:
        AccountValidationError: A confirmation was sent and differs
    """
    if confirm is not None and password != confirm:
        raise AccountValidationError("Las contraseñas no coinciden")


def validate_ci_path(ci: str) -> str:
    """
    Returns:
        str: Digits of the CI

    Raises:
        AccountValidationError: No digits in the path value
    """
    clean = sanitize_ci(ci)
    if not clean:
        raise AccountValidationError("CI inválido")
    return clean
