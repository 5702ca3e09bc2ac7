"""
Test suite for AuditLogService.

Uses the in-memory database for the happy path and a failing session
mock for the retry queue.

System role: Verification of audit trail writes, listing and retry
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from user_portal.application.services import audit_log_service
from user_portal.application.services.audit_log_service import AuditLogService, describe_device


@pytest.fixture(autouse=True)
def empty_pending_queue():
    audit_log_service._pending.clear()
    yield
    audit_log_service._pending.clear()


@pytest.fixture
def failing_db() -> AsyncMock:
    """Session whose flush always fails."""
    db = AsyncMock(spec=AsyncSession)
    db.add = MagicMock()
    db.flush = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("db down")))
    return db


class TestDescribeDevice:

    @pytest.mark.parametrize(
        "user_agent, expected",
        [
            ("Mozilla/5.0 (Linux; Android 13; Pixel 7)", "Android"),
            ("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)", "iOS"),
            ("Mozilla/5.0 (Windows NT 10.0; Win64; x64)", "Windows"),
            ("Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0)", "macOS"),
            ("Mozilla/5.0 (X11; Linux x86_64)", "Linux"),
            ("curl/8.4.0", "Otro"),
            (None, None),
        ],
    )
    def test_user_agent_to_label(self, user_agent, expected) -> None:
        assert describe_device(user_agent) == expected


class TestAuditLogWrites:

    @pytest.mark.asyncio
    async def test_log_persists_entry(self, test_async_db: AsyncSession) -> None:
        # Arrange
        service = AuditLogService(test_async_db)

        # Act
        written = await service.log_authentication(
            "jperez", True, ip="10.0.0.1", user_agent="Mozilla/5.0 (Windows NT 10.0)"
        )
        listing = await service.list_logs()

        # Assert
        assert written is True
        assert listing["pagination"]["total"] == 1
        entry = listing["logs"][0]
        assert entry["username"] == "jperez"
        assert entry["action"] == "LOGIN"
        assert entry["device"] == "Windows"

    @pytest.mark.asyncio
    async def test_failed_write_is_queued(self, failing_db: AsyncMock) -> None:
        service = AuditLogService(failing_db)

        written = await service.log_password_change("jperez", False, {"flow": "pin_recovery"})

        assert written is False
        assert audit_log_service.pending_count() == 1
        failing_db.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_retry_pending_flushes_queue(
        self, failing_db: AsyncMock, test_async_db: AsyncSession
    ) -> None:
        # Arrange
        await AuditLogService(failing_db).log_authentication("jperez", True)
        assert audit_log_service.pending_count() == 1

        # Act
        result = await AuditLogService(test_async_db).retry_pending()

        # Assert
        assert result == {"retried": 1, "still_pending": 0}
        assert audit_log_service.pending_count() == 0

    @pytest.mark.asyncio
    async def test_retry_keeps_entries_that_still_fail(self, failing_db: AsyncMock) -> None:
        service = AuditLogService(failing_db)
        await service.log_authentication("jperez", True)

        result = await service.retry_pending()

        assert result == {"retried": 0, "still_pending": 1}


class TestAuditLogQueries:

    @pytest.mark.asyncio
    async def test_list_logs_paginates_and_filters(self, test_async_db: AsyncSession) -> None:
        # Arrange
        service = AuditLogService(test_async_db)
        for i in range(5):
            await service.log_authentication("jperez", i % 2 == 0)
        await service.log_password_change("jperez", True)

        # Act
        page = await service.list_logs(page=2, limit=2, username="jperez", exact_username=True)

        # Assert
        assert page["pagination"] == {"page": 2, "limit": 2, "total": 5, "total_pages": 3}
        assert len(page["logs"]) == 2
        assert page["filters"]["action"] == "LOGIN"

    @pytest.mark.asyncio
    async def test_stats_counts_success_and_failure(self, test_async_db: AsyncSession) -> None:
        service = AuditLogService(test_async_db)
        await service.log_authentication("jperez", True)
        await service.log_authentication("jperez", False)
        await service.log_authentication("other", True)

        mine = await service.stats(username="jperez")
        everyone = await service.stats()

        assert mine == {"total": 2, "successful": 1, "failed": 1, "pending": 0}
        assert everyone["total"] == 3
