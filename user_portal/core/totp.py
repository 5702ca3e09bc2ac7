"""
TOTP helpers.

Secret generation, cleaning and code verification for authenticator
apps (SHA1, 6 digits, 30 second period).

Dependencies: pyotp
System role: Time-based one-time password primitives
"""

import re
import secrets
import string

import pyotp

DIGITS = 6
PERIOD = 30
DEFAULT_WINDOW = 2

_SECRET_PATTERN = re.compile(r"^[A-Z2-7]{16,64}$")
_CODE_PATTERN = re.compile(r"[0-9]{6}")
_BACKUP_ALPHABET = string.ascii_uppercase + string.digits


def generate_secret() -> str:
    """Return a new 32-character base32 secret."""
    return pyotp.random_base32(length=32)


def generate_backup_codes(count: int = 8, length: int = 8) -> list[str]:
    return [
        "".join(secrets.choice(_BACKUP_ALPHABET) for _ in range(length))
        for _ in range(count)
    ]


def clean_secret(secret: str) -> str:
    """Strip separators and padding that authenticator exports add."""
    return re.sub(r"[\s\-_=]", "", secret).upper()


def is_valid_secret(secret: str) -> bool:
    return bool(_SECRET_PATTERN.match(secret))


def is_valid_code(code: str) -> bool:
    return bool(_CODE_PATTERN.fullmatch(code or ""))


def verify_code(secret: str, code: str, window: int = DEFAULT_WINDOW) -> bool:
    """
    Check a 6-digit code against a secret.

    Args:
        secret: Cleaned base32 secret
        code: Code typed by the user
        window: Number of 30 s steps accepted before and after now

    Returns:
        bool: True when the code matches within the window
    """
    if not is_valid_code(code):
        return False
    totp = pyotp.TOTP(secret, digits=DIGITS, interval=PERIOD)
    return totp.verify(code, valid_window=window)


def provisioning_uri(secret: str, account: str, issuer: str) -> str:
    return pyotp.TOTP(secret, digits=DIGITS, interval=PERIOD).provisioning_uri(
        name=account, issuer_name=issuer
    )
