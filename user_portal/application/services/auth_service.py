"""
Authentication service orchestrator.

Validates directory credentials and issues the portal's JWT pair.

Dependencies: user_portal.boundary.ldap, user_portal.core.security
System role: Login and token refresh use cases
"""

import logging
from typing import Any

from user_portal.application.services.audit_log_service import AuditLogService
from user_portal.boundary.ldap import DirectoryClient, DirectoryEntry, filters
from user_portal.configs import get_settings
from user_portal.core.exceptions import AuthenticationError, NotFoundError
from user_portal.core.security import create_access_token, create_refresh_token, decode_token
from user_portal.core.ttl_cache import user_cache

logger = logging.getLogger(__name__)

LOGIN_ATTRIBUTES = [
    "sAMAccountName",
    "displayName",
    "mail",
    "givenName",
    "sn",
    "userPrincipalName",
    "employeeID",
]


def _bind_name(username: str, domain: str) -> str:
    return username if "@" in username else f"{username}@{domain}"


def map_login_user(entry: DirectoryEntry, username: str) -> dict[str, Any]:
    sam = entry.get("sAMAccountName") or username
    display_name = entry.get("displayName")
    return {
        "sAMAccountName": sam,
        "dn": entry.dn,
        "username": sam,
        "nombreCompleto": display_name,
        "email": entry.get("mail") or entry.get("userPrincipalName"),
        "nombre": entry.get("givenName"),
        "apellido": entry.get("sn"),
        "displayName": display_name,
        "employeeID": entry.get("employeeID") or None,
    }


class AuthService:
    """Login, token refresh and identity lookups."""

    def __init__(self, directory: DirectoryClient, audit: AuditLogService) -> None:
        self.directory = directory
        self.audit = audit
        self.domain = get_settings().ldap.domain

    async def get_user_data(self, username: str) -> dict[str, Any]:
        """
        Directory data for a sAMAccountName or UPN, cached.

        Raises:
            NotFoundError: Account does not exist
        """
        cache_key = f"login:{username}"
        cached = user_cache.get(cache_key)
        if cached is not None:
            return cached

        entry = await self.directory.find_one(filters.by_sam_or_upn(username), attributes=LOGIN_ATTRIBUTES)
        if entry is None:
            raise NotFoundError(f"Usuario {username} no encontrado", identifier=username)
        user = map_login_user(entry, username)
        user_cache.set(cache_key, user)
        return user

    async def login(
        self,
        username: str,
        password: str,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> dict[str, Any]:
        """
        Authenticate against the directory.

        Returns:
            dict: accessToken, refreshToken and the user profile

        Raises:
            AuthenticationError: Invalid credentials
        """
        username = username.strip()
        authenticated = await self.directory.bind_as(_bind_name(username, self.domain), password)
        if not authenticated:
            await self.audit.log_authentication(
                username, False, {"reason": "invalid_credentials"}, ip, user_agent
            )
            logger.info("Login rejected", extra={"username": username})
            raise AuthenticationError("Credenciales inválidas")

        user = await self.get_user_data(username)
        claims = {"sAMAccountName": user["sAMAccountName"], "username": user["username"]}
        await self.audit.log_authentication(user["sAMAccountName"], True, None, ip, user_agent)
        logger.info("Login succeeded", extra={"username": user["sAMAccountName"]})
        return {
            "accessToken": create_access_token(claims),
            "refreshToken": create_refresh_token(claims),
            "user": user,
        }

    def refresh(self, refresh_token: str) -> dict[str, str]:
        """Issue a new access token from a valid refresh token."""
        payload = decode_token(refresh_token, "refresh")
        claims = {
            "sAMAccountName": payload.get("sAMAccountName"),
            "username": payload.get("username"),
        }
        return {"accessToken": create_access_token(claims)}

    async def employee_check(self, username: str) -> dict[str, Any]:
        user = await self.get_user_data(username)
        return {
            "sAMAccountName": user["sAMAccountName"],
            "isEmployee": bool(user.get("employeeID")),
            "employeeID": user.get("employeeID"),
        }
