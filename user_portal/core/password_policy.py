"""
Password complexity policy.

Mirrors the domain password policy so users get a readable error before
the directory rejects the change.

Dependencies: user_portal.core.text
System role: Password validation rules
"""

import re

from user_portal.core.text import normalize_for_comparison

MIN_LENGTH = 8

_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"[a-z]"), "Debe contener al menos una letra minúscula"),
    (re.compile(r"[A-Z]"), "Debe contener al menos una letra mayúscula"),
    (re.compile(r"\d"), "Debe contener al menos un número"),
    (re.compile(r"[^a-zA-Z0-9]"), "Debe contener al menos un carácter especial"),
]


def validate_password_policy(
    password: str,
    username: str | None = None,
    display_name: str | None = None,
) -> tuple[bool, list[str]]:
    """
    Check a candidate password against the policy.

    Args:
        password: Candidate password
        username: sAMAccountName that must not appear in the password
        display_name: Full name whose parts longer than 2 characters must
            not appear in the password

    Returns:
        tuple[bool, list[str]]: (valid, human-readable violations)
    """
    errors: list[str] = []

    if len(password) < MIN_LENGTH:
        errors.append(f"Debe tener al menos {MIN_LENGTH} caracteres")

    for pattern, message in _RULES:
        if not pattern.search(password):
            errors.append(message)

    if any(ord(ch) < 32 or ord(ch) > 126 for ch in password):
        errors.append("Contiene caracteres no permitidos")

    normalized = normalize_for_comparison(password)
    if username and normalize_for_comparison(username) in normalized:
        errors.append("No puede contener el nombre de usuario")

    if display_name:
        for part in display_name.split():
            clean = normalize_for_comparison(part)
            if len(clean) > 2 and clean in normalized:
                errors.append("No puede contener partes del nombre completo")
                break

    return not errors, errors


def encode_ad_password(password: str) -> bytes:
    """Encode for ``unicodePwd``: the quoted password in UTF-16LE."""
    return f'"{password}"'.encode("utf-16-le")
