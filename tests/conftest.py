"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database session, mocked directory client, encryption,
bearer token headers and cache isolation
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from user_portal.boundary.ldap.entries import DirectoryEntry


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from user_portal.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(autouse=True)
def clear_caches():
    """Keep process-wide caches from leaking between tests."""
    from user_portal.core.ttl_cache import career_cache, student_cache, user_cache, user_dn_cache

    for cache in (user_cache, user_dn_cache, student_cache, career_cache):
        cache.clear()
    yield
    for cache in (user_cache, user_dn_cache, student_cache, career_cache):
        cache.clear()


@pytest.fixture
def mock_directory():
    """
    Create mock DirectoryClient for testing.

    Returns:
        MagicMock: DirectoryClient with async operations and no entries
    """
    directory = MagicMock()
    directory.search = AsyncMock(return_value=[])
    directory.find_one = AsyncMock(return_value=None)
    directory.exists = AsyncMock(return_value=False)
    directory.add = AsyncMock()
    directory.modify_replace = AsyncMock()
    directory.modify_add = AsyncMock()
    directory.delete = AsyncMock()
    directory.add_member = AsyncMock()
    directory.remove_member = AsyncMock()
    directory.set_password = AsyncMock()
    directory.bind_as = AsyncMock(return_value=True)
    directory.ping = AsyncMock(return_value=True)
    directory.get_user_dn = AsyncMock(return_value=None)
    return directory


@pytest.fixture
def make_entry():
    """Build DirectoryEntry objects from keyword attributes."""

    def _make(dn: str = "CN=Juan Perez,OU=Usuarios,DC=uniss,DC=edu,DC=cu", **attributes: str) -> DirectoryEntry:
        return DirectoryEntry(dn=dn, attributes={k: [v] for k, v in attributes.items()})

    return _make


@pytest.fixture
def encryption():
    from user_portal.core.encryption import EncryptionService

    return EncryptionService("test-passphrase")


@pytest.fixture
def mock_mailer():
    """
    Create mock SMTPMailer for testing.

    Returns:
        MagicMock: Mailer whose send succeeds and whose stats are fixed
    """
    mailer = MagicMock()
    mailer.send = AsyncMock(return_value=True)
    mailer.stats = MagicMock(
        return_value={"count": 1, "remaining": 499, "daily_limit": 500, "usage_message": "1/500"}
    )
    return mailer


@pytest.fixture
def auth_headers():
    """Bearer header for user jperez."""
    from user_portal.core.security import create_access_token

    token = create_access_token({"sAMAccountName": "jperez", "username": "jperez"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client():
    """
    TestClient over a fresh app; the lifespan is not run.

    Tests register service mocks on ``client.app.dependency_overrides``.
    """
    from fastapi.testclient import TestClient

    from user_portal.api.main import create_app

    test_client = TestClient(create_app())
    yield test_client
    test_client.app.dependency_overrides.clear()
