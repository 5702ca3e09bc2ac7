"""
Active Directory client.

Async facade over ldap3. Blocking ldap3 calls run in a worker thread on a
pooled admin connection; transient failures (lost connections, result
code 80) are retried with linear backoff.

Dependencies: ldap3, tenacity, user_portal.boundary.ldap.pool
System role: Directory read/write adapter for all account operations
"""

import asyncio
import logging
from functools import lru_cache
from typing import Any, Callable, TypeVar

from ldap3 import (
    BASE,
    MODIFY_ADD,
    MODIFY_DELETE,
    MODIFY_REPLACE,
    SUBTREE,
    Connection,
)
from ldap3.core.exceptions import LDAPCommunicationError, LDAPException
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from user_portal.boundary.ldap import filters
from user_portal.boundary.ldap.entries import DirectoryEntry
from user_portal.boundary.ldap.pool import LDAPConnectionPool
from user_portal.configs import get_settings
from user_portal.configs.ldap import LDAPSettings
from user_portal.core.exceptions import DirectoryError
from user_portal.core.password_policy import encode_ad_password

logger = logging.getLogger(__name__)

T = TypeVar("T")

# LDAP result codes the services branch on
SUCCESS = 0
NO_SUCH_ATTRIBUTE = 16
NO_SUCH_OBJECT = 32
INVALID_CREDENTIALS = 49
ENTRY_ALREADY_EXISTS = 68
OTHER = 80

TRANSIENT_RESULT_CODES = frozenset({51, 52, OTHER})


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, DirectoryError) and exc.transient


def _raise_for_result(conn: Connection, operation: str, target: str) -> None:
    result = conn.result or {}
    code = result.get("result", OTHER)
    if code == SUCCESS:
        return
    description = result.get("description") or "error"
    message = result.get("message") or ""
    raise DirectoryError(
        f"LDAP {operation} failed for {target}: {description} {message}".strip(),
        result_code=code,
        transient=code in TRANSIENT_RESULT_CODES,
        details={"operation": operation},
    )


class DirectoryClient:
    """High-level directory operations used by the services."""

    def __init__(self, settings: LDAPSettings, pool: LDAPConnectionPool | None = None) -> None:
        self.settings = settings
        self.pool = pool or LDAPConnectionPool(settings)

    @property
    def base_dn(self) -> str:
        return self.settings.base_dn

    def _on_connection(self, fn: Callable[[Connection], T]) -> T:
        with self.pool.acquire() as conn:
            try:
                return fn(conn)
            except LDAPCommunicationError as e:
                raise DirectoryError(
                    f"LDAP connection lost: {e}", result_code=OTHER, transient=True
                ) from e

    async def _execute(self, operation: str, fn: Callable[[Connection], T]) -> T:
        """Run *fn* on a pooled connection, retrying transient failures."""
        async for attempt in AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self.settings.retry_attempts + 1),
            wait=wait_incrementing(
                start=self.settings.retry_delay, increment=self.settings.retry_delay
            ),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:{operation} - Retry {retry_state.attempt_number}/"
                f"{self.settings.retry_attempts} after connection error"
            ),
            reraise=True,
        ):
            with attempt:
                return await asyncio.to_thread(self._on_connection, fn)
        raise AssertionError("unreachable")

    async def search(
        self,
        search_filter: str,
        attributes: list[str] | None = None,
        base: str | None = None,
        scope: str = SUBTREE,
        paged: bool = False,
    ) -> list[DirectoryEntry]:
        """
        Search the directory.

        Args:
            search_filter: Pre-escaped LDAP filter
            attributes: Attributes to return (defaults to USER_ATTRIBUTES)
            base: Search base (defaults to base_dn)
            scope: ldap3 scope constant
            paged: Use the paged results control for large result sets

        Returns:
            list[DirectoryEntry]: Matching entries, empty when nothing matched
        """
        search_base = base or self.base_dn
        attrs = attributes or filters.USER_ATTRIBUTES

        def op(conn: Connection) -> list[DirectoryEntry]:
            if paged:
                response = conn.extend.standard.paged_search(
                    search_base,
                    search_filter,
                    search_scope=scope,
                    attributes=attrs,
                    paged_size=500,
                    generator=False,
                )
            else:
                conn.search(search_base, search_filter, search_scope=scope, attributes=attrs)
                response = conn.response or []
            # paged_search only raises when the connection sets raise_exceptions
            if (conn.result or {}).get("result") not in (SUCCESS, NO_SUCH_OBJECT):
                _raise_for_result(conn, "search", search_base)
            return [
                DirectoryEntry.from_response(item)
                for item in response
                if item.get("type") == "searchResEntry"
            ]

        return await self._execute("search", op)

    async def find_one(
        self,
        search_filter: str,
        attributes: list[str] | None = None,
        base: str | None = None,
    ) -> DirectoryEntry | None:
        entries = await self.search(search_filter, attributes=attributes, base=base)
        return entries[0] if entries else None

    async def exists(self, dn: str) -> bool:
        """True when an entry with exactly this DN exists."""
        entries = await self.search("(objectClass=*)", attributes=["objectClass"], base=dn, scope=BASE)
        return bool(entries)

    async def add(self, dn: str, object_classes: list[str], attributes: dict[str, Any]) -> None:
        def op(conn: Connection) -> None:
            conn.add(dn, object_class=object_classes, attributes=attributes)
            _raise_for_result(conn, "add", dn)

        await self._execute("add", op)
        logger.info("Directory entry created", extra={"dn": dn})

    async def _modify(self, dn: str, changes: dict[str, list[tuple[str, list[Any]]]], operation: str) -> None:
        def op(conn: Connection) -> None:
            conn.modify(dn, changes)
            _raise_for_result(conn, operation, dn)

        await self._execute(operation, op)

    async def modify_replace(self, dn: str, values: dict[str, Any]) -> None:
        """Replace attribute values; each value may be a scalar or a list."""
        changes = {
            attr: [(MODIFY_REPLACE, value if isinstance(value, list) else [value])]
            for attr, value in values.items()
        }
        await self._modify(dn, changes, "modify_replace")

    async def modify_add(self, dn: str, values: dict[str, Any]) -> None:
        changes = {
            attr: [(MODIFY_ADD, value if isinstance(value, list) else [value])]
            for attr, value in values.items()
        }
        await self._modify(dn, changes, "modify_add")

    async def delete(self, dn: str) -> None:
        def op(conn: Connection) -> None:
            conn.delete(dn)
            _raise_for_result(conn, "delete", dn)

        await self._execute("delete", op)
        logger.info("Directory entry deleted", extra={"dn": dn})

    async def add_member(self, group_dn: str, member_dn: str) -> None:
        """Add a member; being a member already is not an error."""
        try:
            await self._modify(group_dn, {"member": [(MODIFY_ADD, [member_dn])]}, "add_member")
        except DirectoryError as e:
            if e.result_code != ENTRY_ALREADY_EXISTS:
                raise

    async def remove_member(self, group_dn: str, member_dn: str) -> None:
        await self._modify(group_dn, {"member": [(MODIFY_DELETE, [member_dn])]}, "remove_member")

    async def set_password(self, dn: str, password: str) -> None:
        """Administrative reset of ``unicodePwd``."""
        await self._modify(
            dn,
            {"unicodePwd": [(MODIFY_REPLACE, [encode_ad_password(password)])]},
            "set_password",
        )

    async def bind_as(self, user: str, password: str) -> bool:
        """
        Check user credentials with a throw-away connection.

        Returns:
            bool: True on a successful bind, False on invalid credentials

        Raises:
            DirectoryError: Server unreachable or any other bind failure
        """
        if not password:
            return False

        def op() -> bool:
            conn = self.pool.new_connection(user, password)
            try:
                if conn.bind():
                    return True
                code = (conn.result or {}).get("result")
                if code == INVALID_CREDENTIALS:
                    return False
                _raise_for_result(conn, "bind", user)
                return False
            except LDAPException as e:
                raise DirectoryError(f"LDAP bind failed: {e}", result_code=OTHER, transient=True) from e
            finally:
                conn.unbind()

        return await asyncio.to_thread(op)

    async def ping(self) -> bool:
        entries = await self.search(
            "(objectClass=*)", attributes=["objectClass"], base=self.base_dn, scope=BASE
        )
        return bool(entries)

    async def get_user_dn(self, sam: str) -> str | None:
        entry = await self.find_one(filters.by_sam(sam), attributes=["sAMAccountName"])
        return entry.dn if entry else None

    def close(self) -> None:
        self.pool.close_all()


@lru_cache
def get_directory_client() -> DirectoryClient:
    return DirectoryClient(get_settings().ldap)
