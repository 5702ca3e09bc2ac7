"""
Test suite for TwoFactorService, TOTPVerificationService and PinService.

System role: Verification of directory-backed 2FA and PIN recovery
"""

from unittest.mock import AsyncMock, MagicMock

import pyotp
import pytest

from user_portal.application.services.pin_service import PIN_ATTRIBUTE, PinService
from user_portal.application.services.totp_verification_service import TOTPVerificationService
from user_portal.application.services.two_factor_service import TwoFactorService
from user_portal.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DirectoryError,
    NotFoundError,
    ValidationError,
)

SECRET = "JBSWY3DPEHPK3PXPJBSWY3DPEHPK3PXP"
USER_DN = "CN=Juan Perez,OU=Usuarios,DC=uniss,DC=edu,DC=cu"


class TestTwoFactorService:

    @pytest.mark.asyncio
    async def test_activate_stores_flag_and_encrypted_secret(self, mock_directory, encryption) -> None:
        # Arrange
        mock_directory.get_user_dn.return_value = USER_DN
        service = TwoFactorService(mock_directory, encryption)

        # Act
        result = await service.activate("jperez", SECRET.lower())

        # Assert
        assert result["success"] is True
        flag_call, secret_call = mock_directory.modify_replace.await_args_list
        assert flag_call.args == (USER_DN, {"userParameters": "2FA ENABLED"})
        stored = secret_call.args[1]["employeeNumber"]
        assert stored.startswith("2FA:")
        assert encryption.extract_from_storage(stored) == SECRET

    @pytest.mark.asyncio
    async def test_activate_rejects_malformed_secret(self, mock_directory, encryption) -> None:
        service = TwoFactorService(mock_directory, encryption)

        with pytest.raises(ValidationError):
            await service.activate("jperez", "not-a-secret")

        mock_directory.modify_replace.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_activate_unknown_user(self, mock_directory, encryption) -> None:
        service = TwoFactorService(mock_directory, encryption)

        with pytest.raises(NotFoundError):
            await service.activate("ghost", SECRET)

    @pytest.mark.asyncio
    async def test_status_reports_flag_and_secret(self, mock_directory, encryption, make_entry) -> None:
        mock_directory.find_one.return_value = make_entry(
            userParameters="2FA ENABLED", employeeNumber=encryption.format_for_storage(SECRET)
        )
        service = TwoFactorService(mock_directory, encryption)

        status = await service.status("jperez")

        assert status == {"enabled": True, "hasSecret": True, "sAMAccountName": "jperez"}

    @pytest.mark.asyncio
    async def test_status_after_deactivation(self, mock_directory, encryption, make_entry) -> None:
        mock_directory.find_one.return_value = make_entry(
            userParameters="2FA DISABLED", employeeNumber="2FA DESACTIVADO"
        )
        service = TwoFactorService(mock_directory, encryption)

        status = await service.status("jperez")

        assert status["enabled"] is False
        assert status["hasSecret"] is False

    @pytest.mark.asyncio
    async def test_deactivate_never_empties_secret_attribute(self, mock_directory, encryption) -> None:
        mock_directory.get_user_dn.return_value = USER_DN
        service = TwoFactorService(mock_directory, encryption)

        await service.deactivate("jperez")

        written = [call.args[1] for call in mock_directory.modify_replace.await_args_list]
        assert written == [{"userParameters": "2FA DISABLED"}, {"employeeNumber": "2FA DESACTIVADO"}]

    def test_generate_secret(self, mock_directory, encryption) -> None:
        service = TwoFactorService(mock_directory, encryption)

        result = service.generate_secret("jperez")

        assert len(result["secret"]) == 32
        assert len(result["backupCodes"]) == 8
        assert result["otpauthUrl"].startswith("otpauth://totp/")
        assert "jperez" in result["otpauthUrl"]


@pytest.fixture
def enrolled_entry(make_entry, encryption):
    return make_entry(
        sAMAccountName="jperez",
        displayName="Juan Pérez",
        userParameters="2FA ENABLED",
        employeeNumber=encryption.format_for_storage(SECRET),
    )


class TestTOTPVerificationService:

    @pytest.mark.asyncio
    async def test_check_user(self, mock_directory, encryption, enrolled_entry, mock_passwords) -> None:
        mock_directory.search.return_value = [enrolled_entry]
        service = TOTPVerificationService(mock_directory, encryption, mock_passwords)

        result = await service.check_user("jperez")

        assert result["has2FA"] is True
        assert result["user"]["sAMAccountName"] == "jperez"

    @pytest.mark.asyncio
    async def test_verify_accepts_current_code(self, mock_directory, encryption, enrolled_entry, mock_passwords) -> None:
        mock_directory.search.return_value = [enrolled_entry]
        service = TOTPVerificationService(mock_directory, encryption, mock_passwords)

        result = await service.verify("jperez", pyotp.TOTP(SECRET).now())

        assert result["valid"] is True

    @pytest.mark.asyncio
    async def test_verify_rejects_wrong_code(self, mock_directory, encryption, enrolled_entry, mock_passwords) -> None:
        mock_directory.search.return_value = [enrolled_entry]
        service = TOTPVerificationService(mock_directory, encryption, mock_passwords)
        current = pyotp.TOTP(SECRET).now()
        wrong = f"{(int(current) + 500000) % 1000000:06d}"

        with pytest.raises(AuthenticationError):
            await service.verify("jperez", wrong)

    @pytest.mark.asyncio
    async def test_verify_rejects_malformed_code(self, mock_directory, encryption, mock_passwords) -> None:
        service = TOTPVerificationService(mock_directory, encryption, mock_passwords)

        with pytest.raises(ValidationError):
            await service.verify("jperez", "12ab")

        mock_directory.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verify_without_secret(self, mock_directory, encryption, make_entry, mock_passwords) -> None:
        mock_directory.search.return_value = [make_entry(sAMAccountName="jperez")]
        service = TOTPVerificationService(mock_directory, encryption, mock_passwords)

        with pytest.raises(NotFoundError):
            await service.verify("jperez", "123456")

    @pytest.mark.asyncio
    async def test_ambiguous_identifier(self, mock_directory, encryption, make_entry, mock_passwords) -> None:
        mock_directory.search.return_value = [make_entry(dn="CN=a"), make_entry(dn="CN=b")]
        service = TOTPVerificationService(mock_directory, encryption, mock_passwords)

        with pytest.raises(ConflictError):
            await service.get_totp_info("juan")

    @pytest.mark.asyncio
    async def test_reset_password_after_valid_code(
        self, mock_directory, encryption, enrolled_entry, mock_passwords
    ) -> None:
        # Arrange
        mock_directory.search.return_value = [enrolled_entry]
        service = TOTPVerificationService(mock_directory, encryption, mock_passwords)

        # Act
        await service.reset_password("jperez", pyotp.TOTP(SECRET).now(), "Uniss#2024x")

        # Assert
        mock_passwords.reset_password.assert_awaited_once_with("jperez", "Uniss#2024x", flow="totp_recovery")

    @pytest.mark.asyncio
    async def test_reset_password_with_wrong_code(
        self, mock_directory, encryption, enrolled_entry, mock_passwords
    ) -> None:
        mock_directory.search.return_value = [enrolled_entry]
        service = TOTPVerificationService(mock_directory, encryption, mock_passwords)
        current = pyotp.TOTP(SECRET).now()
        wrong = f"{(int(current) + 500000) % 1000000:06d}"

        with pytest.raises(AuthenticationError):
            await service.reset_password("jperez", wrong, "Uniss#2024x")

        mock_passwords.reset_password.assert_not_awaited()


@pytest.fixture
def mock_passwords() -> MagicMock:
    passwords = MagicMock()
    passwords.change_password = AsyncMock(return_value={"success": True, "message": "ok"})
    passwords.reset_password = AsyncMock(return_value={"success": True, "message": "ok"})
    return passwords


class TestPinService:

    @pytest.mark.asyncio
    async def test_save_encrypts_pin(self, mock_directory, encryption, mock_passwords, make_entry) -> None:
        # Arrange
        mock_directory.find_one.return_value = make_entry(sAMAccountName="jperez")
        service = PinService(mock_directory, encryption, mock_passwords)

        # Act
        await service.save("jperez", "482915")

        # Assert
        dn, changes = mock_directory.modify_replace.await_args.args
        assert dn == USER_DN
        assert encryption.decrypt(changes[PIN_ATTRIBUTE]) == "482915"

    @pytest.mark.asyncio
    async def test_save_adds_attribute_when_missing(
        self, mock_directory, encryption, mock_passwords, make_entry
    ) -> None:
        mock_directory.find_one.return_value = make_entry(sAMAccountName="jperez")
        mock_directory.modify_replace.side_effect = DirectoryError("no attr", result_code=16)
        service = PinService(mock_directory, encryption, mock_passwords)

        await service.save("jperez", "482915")

        mock_directory.modify_add.assert_awaited_once()

    @pytest.mark.parametrize("pin", ["111111", "123456", "654321", "121212", "12345"])
    @pytest.mark.asyncio
    async def test_save_rejects_weak_pins(self, mock_directory, encryption, mock_passwords, pin) -> None:
        service = PinService(mock_directory, encryption, mock_passwords)

        with pytest.raises(ValidationError):
            await service.save("jperez", pin)

        mock_directory.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_has_pin(self, mock_directory, encryption, mock_passwords, make_entry) -> None:
        service = PinService(mock_directory, encryption, mock_passwords)
        mock_directory.find_one.return_value = make_entry(serialNumber=encryption.encrypt("482915"))
        assert await service.has_pin("jperez") is True

        mock_directory.find_one.return_value = make_entry(serialNumber=" ")
        assert await service.has_pin("jperez") is False

    @pytest.mark.asyncio
    async def test_find_user_falls_back_to_employee_id(
        self, mock_directory, encryption, mock_passwords, make_entry
    ) -> None:
        entry = make_entry(sAMAccountName="jperez", employeeID="85010112345")
        mock_directory.find_one.side_effect = [None, entry]
        service = PinService(mock_directory, encryption, mock_passwords)

        found = await service.find_user("85010112345")

        assert found is entry
        assert "employeeID=85010112345" in mock_directory.find_one.await_args_list[1].args[0]

    @pytest.mark.asyncio
    async def test_recovery_reset_with_correct_pin(
        self, mock_directory, encryption, mock_passwords, make_entry
    ) -> None:
        mock_directory.find_one.return_value = make_entry(
            sAMAccountName="jperez", displayName="Juan Pérez", serialNumber=encryption.encrypt("482915")
        )
        service = PinService(mock_directory, encryption, mock_passwords)

        await service.reset_password_with_pin("jperez", "482915", "Uniss#2024x")

        mock_passwords.reset_password.assert_awaited_once_with("jperez", "Uniss#2024x", flow="pin_recovery")

    @pytest.mark.asyncio
    async def test_recovery_with_wrong_pin(self, mock_directory, encryption, mock_passwords, make_entry) -> None:
        mock_directory.find_one.return_value = make_entry(serialNumber=encryption.encrypt("482915"))
        service = PinService(mock_directory, encryption, mock_passwords)

        with pytest.raises(AuthenticationError):
            await service.verify_for_recovery("jperez", "000001")

        mock_passwords.reset_password.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recovery_without_pin(self, mock_directory, encryption, mock_passwords, make_entry) -> None:
        mock_directory.find_one.return_value = make_entry(serialNumber=" ")
        service = PinService(mock_directory, encryption, mock_passwords)

        with pytest.raises(NotFoundError):
            await service.verify_for_recovery("jperez", "482915")
