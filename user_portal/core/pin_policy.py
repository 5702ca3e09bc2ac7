"""
Recovery PIN rules.

Dependencies: re (stdlib)
System role: PIN validation
"""

import re

PIN_LENGTH = 6

# ASCII digits only, used with fullmatch
_SIX_DIGITS = re.compile(r"[0-9]{6}")
_SAME_DIGIT = re.compile(r"([0-9])\1{5}")
_REPEATED_PAIR = re.compile(r"([0-9]{2})\1{2}")
_BASE64_LIKE = re.compile(r"^[A-Za-z0-9+/=_\-]+$")


def is_six_digits(value: str) -> bool:
    return bool(_SIX_DIGITS.fullmatch(value or ""))


def _is_sequence(pin: str) -> bool:
    steps = {int(b) - int(a) for a, b in zip(pin, pin[1:])}
    return steps in ({1}, {-1})


def validate_pin(pin: str) -> tuple[bool, str | None]:
    """
    Returns:
        tuple[bool, str | None]: (valid, reason when invalid)
    """
    if not is_six_digits(pin):
        return False, "El PIN debe tener exactamente 6 dígitos"
    if _SAME_DIGIT.fullmatch(pin):
        return False, "El PIN no puede ser el mismo dígito repetido"
    if _is_sequence(pin):
        return False, "El PIN no puede ser una secuencia consecutiva"
    if _REPEATED_PAIR.fullmatch(pin):
        return False, "El PIN no puede repetir el mismo par de dígitos"
    return True, None


def looks_encrypted(stored: str | None) -> bool:
    """True when a ``serialNumber`` value holds an encrypted PIN."""
    if not stored or not stored.strip():
        return False
    return len(stored) > 10 and bool(_BASE64_LIKE.match(stored))
