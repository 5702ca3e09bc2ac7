"""
Directory lookup helpers shared by the account services.

Dependencies: user_portal.boundary.ldap, user_portal.core.ttl_cache
System role: Common user resolution against Active Directory
"""

from typing import Any

from user_portal.boundary.ldap import DirectoryClient, DirectoryEntry, filters
from user_portal.core.exceptions import ConflictError, NotFoundError
from user_portal.core.ttl_cache import user_dn_cache

SUMMARY_ATTRIBUTES = [
    "sAMAccountName",
    "employeeID",
    "displayName",
    "cn",
    "mail",
    "userPrincipalName",
    "company",
    "title",
    "userAccountControl",
]


async def resolve_user_dn(directory: DirectoryClient, sam: str) -> str:
    """
    DN for a sAMAccountName, cached for an hour.

    Raises:
        NotFoundError: No such account
    """
    cached = user_dn_cache.get(sam)
    if cached:
        return cached
    dn = await directory.get_user_dn(sam)
    if not dn:
        raise NotFoundError(f"Usuario {sam} no encontrado", identifier=sam)
    user_dn_cache.set(sam, dn)
    return dn


async def find_unique_user(
    directory: DirectoryClient,
    search_filter: str,
    identifier: str,
    attributes: list[str] | None = None,
) -> DirectoryEntry:
    """
    Exactly one entry matching *search_filter*.

    Raises:
        NotFoundError: Nothing matched
        ConflictError: More than one entry matched
    """
    entries = await directory.search(search_filter, attributes=attributes or SUMMARY_ATTRIBUTES)
    if not entries:
        raise NotFoundError(f"Usuario {identifier} no encontrado", identifier=identifier)
    if len(entries) > 1:
        raise ConflictError(f"Múltiples usuarios coinciden con {identifier}")
    return entries[0]


async def find_by_sam_then_employee_id(
    directory: DirectoryClient,
    identifier: str,
    attributes: list[str] | None = None,
) -> DirectoryEntry:
    """Look up by username first, then by identity card number."""
    attrs = attributes or SUMMARY_ATTRIBUTES
    entry = await directory.find_one(filters.by_sam(identifier), attributes=attrs)
    if entry is None:
        entry = await directory.find_one(
            f"(employeeID={filters.escape(identifier)})", attributes=attrs
        )
    if entry is None:
        raise NotFoundError(f"Usuario {identifier} no encontrado", identifier=identifier)
    return entry


def summarize_user(entry: DirectoryEntry) -> dict[str, Any]:
    """Public fields returned by the recovery endpoints."""
    return {
        "dn": entry.dn,
        "sAMAccountName": entry.get("sAMAccountName"),
        "employeeID": entry.get("employeeID"),
        "displayName": entry.get("displayName") or entry.get("cn"),
        "mail": entry.get("mail") or entry.get("userPrincipalName"),
        "userPrincipalName": entry.get("userPrincipalName"),
        "accountStatus": "Activa" if entry.account_enabled else "Deshabilitada",
    }
