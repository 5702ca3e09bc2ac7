"""
Test suite for DirectoryClient retries and the LDAP connection pool.

ldap3 connections are replaced by MagicMocks handed out by a real
LDAPConnectionPool, so borrow/discard bookkeeping is exercised too.

System role: Verification of LDAP failure handling
"""

from unittest.mock import MagicMock

import pytest
from ldap3.core.exceptions import LDAPCommunicationError

from user_portal.boundary.ldap.client import DirectoryClient
from user_portal.boundary.ldap.pool import LDAPConnectionPool
from user_portal.configs.ldap import LDAPSettings
from user_portal.core.exceptions import DirectoryError

BASE = "DC=uniss,DC=edu,DC=cu"


def _connection(result_code: int = 0) -> MagicMock:
    conn = MagicMock()
    conn.closed = False
    conn.result = {"result": result_code, "description": "other" if result_code else "success"}
    conn.response = []
    return conn


@pytest.fixture
def settings() -> LDAPSettings:
    return LDAPSettings(base_dn=BASE, retry_attempts=2, retry_delay=0, pool_size=2)


def _client(settings: LDAPSettings, *connections: MagicMock) -> tuple[DirectoryClient, LDAPConnectionPool]:
    pool = LDAPConnectionPool(settings, server=MagicMock())
    pool._open_admin = MagicMock(side_effect=list(connections))
    return DirectoryClient(settings, pool=pool), pool


class TestRetries:

    @pytest.mark.asyncio
    async def test_busy_result_is_retried_then_raised(self, settings: LDAPSettings) -> None:
        # Arrange
        connections = [_connection(80) for _ in range(3)]
        client, _ = _client(settings, *connections)

        # Act
        with pytest.raises(DirectoryError) as exc_info:
            await client.modify_replace("CN=Juan," + BASE, {"company": "juan@gmail.com"})

        # Assert
        assert exc_info.value.transient is True
        assert sum(conn.modify.call_count for conn in connections) == settings.retry_attempts + 1

    @pytest.mark.asyncio
    async def test_constraint_violation_is_not_retried(self, settings: LDAPSettings) -> None:
        conn = _connection(19)
        client, pool = _client(settings, conn)

        with pytest.raises(DirectoryError) as exc_info:
            await client.modify_replace("CN=Juan," + BASE, {"company": "x"})

        assert exc_info.value.result_code == 19
        assert exc_info.value.transient is False
        assert conn.modify.call_count == 1
        conn.unbind.assert_not_called()
        assert pool._idle.qsize() == 1

    @pytest.mark.asyncio
    async def test_transport_error_discards_connection(self, settings: LDAPSettings) -> None:
        # Arrange
        broken = _connection()
        broken.delete.side_effect = LDAPCommunicationError("socket closed")
        healthy = _connection()
        client, pool = _client(settings, broken, healthy)

        # Act
        await client.delete("CN=Juan," + BASE)

        # Assert
        broken.unbind.assert_called_once()
        healthy.delete.assert_called_once_with("CN=Juan," + BASE)
        assert pool._idle.qsize() == 1
        assert pool._created == 1


class TestSearchResults:

    @pytest.mark.asyncio
    async def test_paged_search_failure_raises(self, settings: LDAPSettings) -> None:
        connections = [_connection(80) for _ in range(3)]
        for conn in connections:
            conn.extend.standard.paged_search.return_value = []
        client, _ = _client(settings, *connections)

        with pytest.raises(DirectoryError):
            await client.search("(objectClass=user)", paged=True)

    @pytest.mark.asyncio
    async def test_paged_search_returns_entries(self, settings: LDAPSettings) -> None:
        conn = _connection()
        conn.extend.standard.paged_search.return_value = [
            {"type": "searchResEntry", "dn": "CN=Juan," + BASE, "attributes": {"sAMAccountName": "jperez"}},
            {"type": "searchResRef", "uri": ["ldap://other"]},
        ]
        client, _ = _client(settings, conn)

        entries = await client.search("(objectClass=user)", paged=True)

        assert [entry.dn for entry in entries] == ["CN=Juan," + BASE]

    @pytest.mark.asyncio
    async def test_missing_base_is_empty_result(self, settings: LDAPSettings) -> None:
        client, _ = _client(settings, _connection(32))

        assert await client.exists("OU=Nada," + BASE) is False
