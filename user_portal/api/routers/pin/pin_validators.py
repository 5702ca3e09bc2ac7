"""
PIN request validation.

Recovery requests are checked for shape only. The strength rules in
core.pin_policy apply when a PIN is saved.

Dependencies: user_portal.core.pin_policy
System role: PIN request validation
"""

from user_portal.core.pin_policy import PIN_LENGTH, is_six_digits


class PinValidationError(ValueError):
    """Raised when a PIN payload is malformed."""


def validate_pin_shape(pin: str) -> str:
    """
    Returns:
        str: The stripped PIN

    Raises:
        PinValidationError: Not exactly six digits
    """
    pin = (pin or "").strip()
    if not is_six_digits(pin):
        raise PinValidationError(f"El PIN debe tener exactamente {PIN_LENGTH} dígitos")
    return pin
