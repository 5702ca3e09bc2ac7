"""
Email verification code store.

Short-lived numeric codes keyed by normalized email address, used by the
password recovery and backup-email confirmation flows.

Dependencies: secrets, threading, time (stdlib)
System role: One-time code storage
"""

import secrets
import threading
import time
from dataclasses import dataclass

DEFAULT_TTL_SECONDS = 10 * 60


@dataclass
class _StoredCode:
    code: str
    expires_at: float


def generate_code(digits: int = 6) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(digits))


class VerificationCodeStore:
    """In-memory code store; a code is consumed by its first successful check."""

    def __init__(self) -> None:
        self._codes: dict[str, _StoredCode] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    def set_code(self, email: str, code: str, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        """Store *code* for *email*, dropping any expired codes first."""
        now = time.monotonic()
        with self._lock:
            self._drop_expired(now)
            self._codes[self._key(email)] = _StoredCode(code, now + ttl_seconds)

    def verify_code(self, email: str, code: str, consume: bool = True) -> bool:
        key = self._key(email)
        with self._lock:
            stored = self._codes.get(key)
            if stored is None:
                return False
            if stored.expires_at <= time.monotonic():
                del self._codes[key]
                return False
            if not secrets.compare_digest(stored.code.encode(), code.strip().encode()):
                return False
            if consume:
                del self._codes[key]
            return True

    def _drop_expired(self, now: float) -> int:
        expired = [key for key, stored in self._codes.items() if stored.expires_at <= now]
        for key in expired:
            del self._codes[key]
        return len(expired)

    def clean_expired(self) -> int:
        """Drop expired codes; returns how many were removed."""
        with self._lock:
            return self._drop_expired(time.monotonic())

    def __len__(self) -> int:
        return len(self._codes)


verification_store = VerificationCodeStore()
