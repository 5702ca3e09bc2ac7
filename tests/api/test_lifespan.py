"""
Test suite for the application lifespan.

Database, LDAP and logging setup are patched out; only the startup
checks are exercised.

System role: Verification of startup and shutdown hooks
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from user_portal.api import main


@pytest.fixture
def patched_startup():
    encryption = MagicMock()
    with patch.object(main, "configure_logging"), patch.object(
        main, "init_models", new=AsyncMock()
    ), patch.object(main, "dispose_engine", new=AsyncMock()) as dispose, patch.object(
        main, "get_directory_client", new=MagicMock()
    ), patch.object(main, "get_encryption_service", return_value=encryption):
        yield encryption, dispose


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_runs_encryption_self_test(self, patched_startup) -> None:
        # Arrange
        encryption, dispose = patched_startup
        encryption.self_test.return_value = True

        # Act
        async with main.lifespan(MagicMock()):
            pass

        # Assert
        encryption.self_test.assert_called_once_with()
        dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_self_test_is_logged(self, patched_startup, caplog) -> None:
        encryption, _ = patched_startup
        encryption.self_test.return_value = False

        with caplog.at_level(logging.ERROR, logger=main.__name__):
            async with main.lifespan(MagicMock()):
                pass

        assert "Secret encryption unusable" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_key_does_not_abort_startup(self, caplog) -> None:
        with patch.object(main, "configure_logging"), patch.object(
            main, "init_models", new=AsyncMock()
        ), patch.object(main, "dispose_engine", new=AsyncMock()), patch.object(
            main, "get_directory_client", new=MagicMock()
        ), patch.object(
            main, "get_encryption_service", side_effect=ValueError("passphrase must not be empty")
        ):
            with caplog.at_level(logging.ERROR, logger=main.__name__):
                async with main.lifespan(MagicMock()):
                    pass

        assert "Secret encryption not configured" in caplog.text
