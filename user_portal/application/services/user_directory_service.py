"""
User directory service orchestrator.

Read-side access to active directory accounts: the paginated user list,
single user profiles and substring search, served from the TTL cache
whenever possible.

Dependencies: user_portal.boundary.ldap, user_portal.core.ttl_cache
System role: User listing and lookup use cases
"""

import logging
import math
from typing import Any

from user_portal.boundary.ldap import DirectoryClient, DirectoryEntry, filters
from user_portal.core.exceptions import DirectoryError, NotFoundError, ValidationError
from user_portal.core.ttl_cache import clear_user_caches, user_cache, user_dn_cache

logger = logging.getLogger(__name__)

ALL_USERS_KEY = "all_users"
MAX_PAGE_SIZE = 200

# Last list read from the directory, served when the directory is down
_last_loaded: list[dict[str, Any]] = []


def map_user(entry: DirectoryEntry) -> dict[str, Any]:
    """Directory entry to the user shape returned by the API."""
    return {
        "sAMAccountName": entry.get("sAMAccountName"),
        "displayName": entry.get("displayName") or entry.get("cn"),
        "mail": entry.get("mail"),
        "title": entry.get("title"),
        "department": entry.get("department"),
        "company": entry.get("company"),
        "telephoneNumber": entry.get("telephoneNumber"),
        "streetAddress": entry.get("streetAddress"),
        "l": entry.get("l"),
        "st": entry.get("st"),
        "description": entry.get("description"),
        "academicYear": entry.get("departmentNumber"),
        "employeeType": entry.get("employeeType"),
        "faculty": entry.get("ou"),
        "employeeID": entry.get("employeeID"),
        "accountEnabled": entry.account_enabled,
        "dn": entry.dn,
    }


def _is_person(user: dict[str, Any]) -> bool:
    sam = user.get("sAMAccountName") or ""
    return bool(sam) and not sam.endswith("$")


class UserDirectoryService:
    """Active account listing and lookup."""

    def __init__(self, directory: DirectoryClient) -> None:
        self.directory = directory

    async def _load_all(self) -> list[dict[str, Any]]:
        cached = user_cache.get(ALL_USERS_KEY)
        if cached is not None:
            return cached
        try:
            entries = await self.directory.search(filters.ACTIVE_USERS, paged=True)
        except DirectoryError:
            if _last_loaded:
                logger.warning(
                    "Directory unavailable, serving last loaded user list",
                    extra={"count": len(_last_loaded)},
                )
                return list(_last_loaded)
            logger.error("Failed to load users from directory")
            raise
        users = [u for u in (map_user(e) for e in entries) if _is_person(u)]
        users.sort(key=lambda u: (u["displayName"] or u["sAMAccountName"]).lower())
        user_cache.set(ALL_USERS_KEY, users)
        _last_loaded[:] = users
        return users

    async def list_users(self, page: int = 1, page_size: int = 20) -> dict[str, Any]:
        """
        One page of active users.

        Returns:
            dict: users and pagination (currentPage, pageSize, totalItems,
            totalPages, hasNextPage, hasPrevPage)
        """
        if page < 1 or page_size < 1:
            raise ValidationError("page y pageSize deben ser mayores que cero")
        page_size = min(page_size, MAX_PAGE_SIZE)

        users = await self._load_all()
        total = len(users)
        total_pages = math.ceil(total / page_size) if total else 0
        start = (page - 1) * page_size
        return {
            "users": users[start:start + page_size],
            "pagination": {
                "currentPage": page,
                "pageSize": page_size,
                "totalItems": total,
                "totalPages": total_pages,
                "hasNextPage": page < total_pages,
                "hasPrevPage": page > 1,
            },
        }

    async def get_user(self, sam: str) -> dict[str, Any]:
        cache_key = f"user:{sam}"
        cached = user_cache.get(cache_key)
        if cached is not None:
            return cached

        entry = await self.directory.find_one(filters.by_sam(sam))
        if entry is None:
            raise NotFoundError(f"Usuario {sam} no encontrado", identifier=sam)
        user = map_user(entry)
        user_cache.set(cache_key, user)
        user_dn_cache.set(sam, entry.dn)
        return user

    async def search(self, term: str, limit: int = 50) -> dict[str, Any]:
        term = (term or "").strip()
        if len(term) < 2:
            raise ValidationError("El término de búsqueda debe tener al menos 2 caracteres", field="term")
        entries = await self.directory.search(filters.search_term(term))
        users = [u for u in (map_user(e) for e in entries) if _is_person(u)]
        return {"users": users[:limit], "total": len(users), "term": term}

    def clear_cache(self) -> dict[str, Any]:
        clear_user_caches()
        logger.info("User caches cleared")
        return {"success": True, "message": "Caché limpiada"}

    def cache_stats(self) -> dict[str, Any]:
        return {
            "allUsers": user_cache.state(ALL_USERS_KEY),
            "users": user_cache.stats(),
            "userDNs": user_dn_cache.stats(),
        }
