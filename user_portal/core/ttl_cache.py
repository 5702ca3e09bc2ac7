"""
In-memory TTL cache.

Process-local key/value store where every entry carries its own expiry.
Used for directory lookups, SIGENU records, the career catalogue and
offered usernames.

Dependencies: threading, time (stdlib)
System role: Short-lived cache shared across requests
"""

import threading
import time
from typing import Any

from user_portal.configs import get_settings


class TTLCache:
    """
    Thread-safe map with per-entry expiry.

    Expired entries are dropped lazily on read. There is no size bound and
    no eviction policy beyond expiry.
    """

    def __init__(self, default_ttl: int) -> None:
        """
        Args:
            default_ttl: Lifetime in seconds for entries set without an explicit TTL
        """
        self.default_ttl = default_ttl
        self._data: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at = time.monotonic() + (ttl if ttl is not None else self.default_ttl)
        with self._lock:
            self._data[key] = (value, expires_at)

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when missing or expired."""
        with self._lock:
            item = self._data.get(key)
            if item is None:
                self._misses += 1
                return None
            value, expires_at = item
            if expires_at <= time.monotonic():
                del self._data[key]
                self._misses += 1
                return None
            self._hits += 1
            return value

    def has(self, key: str) -> bool:
        return self.ttl_remaining(key) > 0

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = time.monotonic()
        with self._lock:
            expired = [key for key, (_, expires_at) in self._data.items() if expires_at <= now]
            for key in expired:
                del self._data[key]
        return len(expired)

    def ttl_remaining(self, key: str) -> float:
        """Seconds until the entry expires; 0 when missing or expired."""
        with self._lock:
            item = self._data.get(key)
        if item is None:
            return 0.0
        return max(0.0, item[1] - time.monotonic())

    def state(self, key: str) -> dict[str, Any]:
        """
        Describe a cached collection.

        Returns:
            dict: exists, count (len of the value when it is sized) and
            remaining_minutes until expiry
        """
        remaining = self.ttl_remaining(key)
        if remaining <= 0:
            return {"exists": False, "count": 0, "remaining_minutes": 0}
        value = self.get(key)
        count = len(value) if hasattr(value, "__len__") else 1
        return {
            "exists": True,
            "count": count,
            "remaining_minutes": round(remaining / 60),
        }

    def stats(self) -> dict[str, int]:
        now = time.monotonic()
        with self._lock:
            live = sum(1 for _, expires_at in self._data.values() if expires_at > now)
            return {"keys": live, "hits": self._hits, "misses": self._misses}


_settings = get_settings()

user_cache = TTLCache(default_ttl=_settings.cache.default_ttl)
user_dn_cache = TTLCache(default_ttl=_settings.cache.user_dn_ttl)
student_cache = TTLCache(default_ttl=_settings.sigenu.student_cache_ttl)
career_cache = TTLCache(default_ttl=_settings.sigenu.career_cache_ttl)
offered_usernames_cache = TTLCache(default_ttl=_settings.cache.offered_usernames_ttl)


def clear_user_caches(username: str | None = None) -> None:
    """Drop cached directory data for one user, or for everyone."""
    if username is None:
        user_cache.clear()
        user_dn_cache.clear()
        return
    user_cache.delete(f"user:{username}")
    user_cache.delete(f"login:{username}")
    user_cache.delete("all_users")
    user_dn_cache.delete(username)
