"""
Secret-at-rest encryption.

Fernet (AES-128-CBC + HMAC) encryption for the short secrets the portal
stores in directory attributes: TOTP seeds in ``employeeNumber`` and PINs
in ``serialNumber``. The Fernet key is derived from the configured
passphrase with scrypt, so the same passphrase always yields the same key.

Dependencies: cryptography, user_portal.configs
System role: Encryption helpers for 2FA and PIN storage
"""

import base64
import logging
import re
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from user_portal.configs import get_settings

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "2FA:"
TOTP_SECRET_PATTERN = re.compile(r"^[A-Z2-7]+=*$")
TOTP_SECRET_LENGTHS = (16, 32)

_KDF_SALT = b"salt"


def derive_key(passphrase: str) -> bytes:
    """Derive a url-safe base64 Fernet key from a passphrase."""
    kdf = Scrypt(salt=_KDF_SALT, length=32, n=2**14, r=8, p=1)
    return base64.urlsafe_b64encode(kdf.derive(passphrase.encode("utf-8")))


class EncryptionService:
    """Encrypt and decrypt short strings with a passphrase-derived key."""

    def __init__(self, passphrase: str) -> None:
        if not passphrase:
            raise ValueError("Encryption passphrase must not be empty")
        self._fernet = Fernet(derive_key(passphrase))

    def encrypt(self, text: str) -> str:
        """Encrypt *text* and return url-safe base64 ciphertext."""
        return self._fernet.encrypt(text.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        """Decrypt *token* back to a UTF-8 string."""
        try:
            return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as exc:
            raise ValueError("decryption failed: invalid key or ciphertext") from exc

    def self_test(self) -> bool:
        """Round-trip a sample value; False means the key is unusable."""
        sample = "JBSWY3DPEHPK3PXP"
        try:
            return self.decrypt(self.encrypt(sample)) == sample
        except ValueError:
            logger.error("Encryption self-test failed")
            return False

    def format_for_storage(self, secret: str) -> str:
        """Encrypt a TOTP secret and prefix it for ``employeeNumber``."""
        return f"{STORAGE_PREFIX}{self.encrypt(secret)}"

    def extract_from_storage(self, stored: str | None) -> str | None:
        """
        Recover a TOTP secret from an ``employeeNumber`` value.

        Returns:
            str | None: The secret, or None when the value does not carry
            one or cannot be decrypted
        """
        if not stored or not stored.startswith(STORAGE_PREFIX):
            return None
        try:
            return self.decrypt(stored[len(STORAGE_PREFIX):])
        except ValueError:
            logger.warning("Stored TOTP secret could not be decrypted")
            return None


def normalize_totp_secret(secret: str) -> str:
    return re.sub(r"\s+", "", secret).upper()


def is_valid_totp_secret(secret: str) -> bool:
    """Base32 alphabet, 16 or 32 characters once padding is removed."""
    if not TOTP_SECRET_PATTERN.match(secret):
        return False
    return len(secret.rstrip("=")) in TOTP_SECRET_LENGTHS


@lru_cache
def get_encryption_service() -> EncryptionService:
    return EncryptionService(get_settings().security.encryption_key)
