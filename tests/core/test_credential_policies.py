"""
Test suite for password and PIN policies.

System role: Verification of credential validation rules
"""

import pytest

from user_portal.api.routers.pin.pin_validators import PinValidationError, validate_pin_shape
from user_portal.core.password_policy import encode_ad_password, validate_password_policy
from user_portal.core.pin_policy import looks_encrypted, validate_pin


class TestPasswordPolicy:

    def test_strong_password_passes(self) -> None:
        valid, errors = validate_password_policy("Uniss#2024x", "jperez", "Juan Perez")

        assert valid is True
        assert errors == []

    def test_short_password_lists_every_violation(self) -> None:
        valid, errors = validate_password_policy("abc")

        assert valid is False
        assert "Debe tener al menos 8 caracteres" in errors
        assert "Debe contener al menos una letra mayúscula" in errors
        assert "Debe contener al menos un número" in errors
        assert "Debe contener al menos un carácter especial" in errors

    def test_username_inside_password_rejected(self) -> None:
        valid, errors = validate_password_policy("Jperez#2024", "jperez")

        assert valid is False
        assert "No puede contener el nombre de usuario" in errors

    def test_display_name_part_rejected_ignoring_accents(self) -> None:
        valid, errors = validate_password_policy("Martinez#2024", "jm", "José Martínez")

        assert valid is False
        assert "No puede contener partes del nombre completo" in errors

    def test_short_name_parts_are_ignored(self) -> None:
        valid, _ = validate_password_policy("Deli#2024x", "jm", "Ana de la Rosa")

        assert valid is True

    def test_non_printable_characters_rejected(self) -> None:
        valid, errors = validate_password_policy("Contraseña#1")

        assert valid is False
        assert "Contiene caracteres no permitidos" in errors

    def test_encode_ad_password_quotes_in_utf16(self) -> None:
        assert encode_ad_password("Ab1!") == '"Ab1!"'.encode("utf-16-le")


class TestPinPolicy:

    @pytest.mark.parametrize("pin", ["482915", "730184"])
    def test_acceptable_pins(self, pin: str) -> None:
        assert validate_pin(pin) == (True, None)

    @pytest.mark.parametrize(
        "pin",
        [
            "12345",
            "1234567",
            "abcdef",
            "111111",
            "123456",
            "654321",
            "121212",
            "",
            "\u0664\u0668\u0662\u0669\u0661\u0667",
            "482915\n",
        ],
    )
    def test_rejected_pins(self, pin: str) -> None:
        valid, reason = validate_pin(pin)

        assert valid is False
        assert reason

    def test_looks_encrypted(self, encryption) -> None:
        assert looks_encrypted(encryption.encrypt("482915")) is True
        assert looks_encrypted(" ") is False
        assert looks_encrypted(None) is False
        assert looks_encrypted("ABC123") is False


class TestPinShape:

    def test_surrounding_whitespace_is_stripped(self) -> None:
        assert validate_pin_shape(" 482915 ") == "482915"

    @pytest.mark.parametrize(
        "pin", ["\u0664\u0668\u0662\u0669\u0661\u0667", "\uff14\uff18\uff12\uff19\uff11\uff15", "48291"]
    )
    def test_non_ascii_or_short_pins_rejected(self, pin: str) -> None:
        with pytest.raises(PinValidationError):
            validate_pin_shape(pin)
