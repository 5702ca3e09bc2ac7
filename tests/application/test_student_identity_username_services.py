"""
Test suite for StudentService, IdentityService and UsernameService.

SIGENU and the employee lookups are mocked.

System role: Verification of student lookups, CI classification and
username suggestions
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from user_portal.application.services.identity_service import IdentityService
from user_portal.application.services.student_service import (
    StudentService,
    format_date,
    format_parent,
    map_career,
    transform_student,
)
from user_portal.application.services.username_service import UsernameService, build_candidates
from user_portal.core.exceptions import NotFoundError, UpstreamServiceError, ValidationError
from user_portal.core.ttl_cache import TTLCache, offered_usernames_cache

RAW_STUDENT = {
    "personalData": {
        "identification": "02031212345",
        "name": "Ana",
        "middleName": "Pérez",
        "lastName": "Gómez",
        "birthDate": "2002-03-12",
        "address": "Calle 1   #23 ",
        "phone": "41234567",
        "nativeOf": "Cabaiguán",
        "province": "Sancti Spíritus",
    },
    "docentData": {
        "faculty": "Facultad de Ingeniería",
        "career": "101",
        "year": "3",
        "academicSituation": "Normal",
        "academicIndex": "4.5",
        "studentStatus": "Activo",
    },
    "motherData": {"name": "Rosa", "ocupation": "Maestra", "level": "Superior"},
}

EMPLOYEE = {
    "ci": "85010112345",
    "firstName": "Juan Carlos",
    "lastName1": "Pérez",
    "lastName2": "Gómez",
    "fullName": "Juan Carlos Pérez Gómez",
}


@pytest.fixture
def mock_sigenu() -> MagicMock:
    sigenu = MagicMock()
    sigenu.get_careers = AsyncMock(return_value=[{"idCarrera": "101", "nombre": "Ingeniería Informática"}])
    sigenu.get_student_all_data = AsyncMock(return_value=[RAW_STUDENT])
    return sigenu


class TestStudentTransforms:

    def test_format_date(self) -> None:
        assert format_date("2001-03-12") == "12 de marzo de 2001"
        assert format_date("") == "Fecha inválida"
        assert format_date("not a date") == "Fecha inválida"

    def test_format_parent(self) -> None:
        assert format_parent({"name": "Rosa", "ocupation": "Maestra", "level": "Superior"}) == (
            "Rosa - Maestra - (Superior)"
        )
        assert format_parent(None) == "No registrado"

    def test_map_career_pads_codes(self) -> None:
        careers = {"00101": "Ingeniería Informática"}

        assert map_career("101", careers) == "Ingeniería Informática"
        assert map_career("999", careers) == "Carrera (999)"
        assert map_career(None, careers) == "Carrera no especificada"

    def test_transform_student(self) -> None:
        data = transform_student(RAW_STUDENT, {"00101": "Ingeniería Informática"})

        assert data["personalData"]["fullName"] == "Ana Pérez Gómez"
        assert data["personalData"]["address"] == "Calle 1 #23"
        assert data["personalData"]["origin"] == "Cabaiguán, Sancti Spíritus"
        assert data["academicData"]["year"] == "3° Año"
        assert data["academicData"]["academicIndex"] == "4.50"
        assert data["familyData"]["father"] == "No registrado"
        assert data["rawData"] is RAW_STUDENT


class TestStudentService:

    @pytest.mark.asyncio
    async def test_get_student_is_cached(self, mock_sigenu) -> None:
        service = StudentService(mock_sigenu)

        first = await service.get_student("020312-12345")
        second = await service.get_student("02031212345")

        assert first == second
        assert first["data"]["academicData"]["career"] == "Ingeniería Informática"
        mock_sigenu.get_student_all_data.assert_awaited_once_with("02031212345")

    @pytest.mark.asyncio
    async def test_missing_student_raises_upstream_error(self, mock_sigenu) -> None:
        mock_sigenu.get_student_all_data.return_value = []
        service = StudentService(mock_sigenu)

        with pytest.raises(UpstreamServiceError):
            await service.get_student("02031212345")

    @pytest.mark.asyncio
    async def test_sigenu_404_means_no_record(self, mock_sigenu) -> None:
        mock_sigenu.get_student_all_data.side_effect = UpstreamServiceError(
            "not found", service="SIGENU", details={"status_code": 404}
        )
        service = StudentService(mock_sigenu)

        assert await service.find_raw("02031212345") is None

    @pytest.mark.asyncio
    async def test_career_catalogue_failure_degrades(self, mock_sigenu) -> None:
        mock_sigenu.get_careers.side_effect = UpstreamServiceError("down", service="SIGENU")
        service = StudentService(mock_sigenu)

        result = await service.get_student("02031212345")

        assert result["data"]["academicData"]["career"] == "Carrera (101)"

    @pytest.mark.asyncio
    async def test_blank_ci(self, mock_sigenu) -> None:
        service = StudentService(mock_sigenu)

        with pytest.raises(ValidationError):
            await service.get_student("abc")


@pytest.fixture
def mock_students() -> MagicMock:
    students = MagicMock()
    students.find = AsyncMock(return_value=None)
    students.find_raw = AsyncMock(return_value=None)
    return students


@pytest.fixture
def mock_employees() -> MagicMock:
    employees = MagicMock()
    employees.find_active = AsyncMock(return_value=None)
    return employees


class TestIdentityService:

    @pytest.mark.asyncio
    async def test_active_student(self, mock_students, mock_employees) -> None:
        # Arrange
        mock_students.find.return_value = transform_student(
            RAW_STUDENT, {"00101": "Ingeniería Informática"}
        )
        service = IdentityService(mock_students, mock_employees)

        # Act
        result = await service.verify_ci("02031212345")

        # Assert
        assert result == {
            "type": "student",
            "data": {
                "fullName": "Ana Pérez Gómez",
                "career": "Ingeniería Informática",
                "faculty": "Facultad de Ingeniería",
                "academicYear": 3,
                "status": "active",
                "ci": "02031212345",
            },
        }
        mock_employees.find_active.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inactive_student_falls_through_to_employee(
        self, mock_students, mock_employees
    ) -> None:
        dropped = {**RAW_STUDENT, "docentData": {**RAW_STUDENT["docentData"], "studentStatus": "Baja"}}
        mock_students.find.return_value = transform_student(dropped, {})
        mock_employees.find_active.return_value = EMPLOYEE
        service = IdentityService(mock_students, mock_employees)

        result = await service.verify_ci("85010112345")

        assert result == {"type": "employee", "data": EMPLOYEE}

    @pytest.mark.asyncio
    async def test_employee(self, mock_students, mock_employees) -> None:
        mock_employees.find_active.return_value = EMPLOYEE
        service = IdentityService(mock_students, mock_employees)

        result = await service.verify_ci("85010112345")

        assert result == {"type": "employee", "data": EMPLOYEE}

    @pytest.mark.asyncio
    async def test_nobody(self, mock_students, mock_employees) -> None:
        service = IdentityService(mock_students, mock_employees)

        with pytest.raises(NotFoundError):
            await service.verify_ci("85010112345")

    @pytest.mark.asyncio
    async def test_dual_status_for_working_student(self, mock_students, mock_employees) -> None:
        mock_students.find_raw.return_value = RAW_STUDENT
        mock_employees.find_active.return_value = EMPLOYEE
        service = IdentityService(mock_students, mock_employees)

        result = await service.dual_status("85010112345")

        assert result["hasDualOccupation"] is True
        assert result["isGraduated"] is False
        assert result["studentStatus"] == "Activo"

    @pytest.mark.asyncio
    async def test_dual_status_for_graduate(self, mock_students, mock_employees) -> None:
        graduate = {**RAW_STUDENT, "docentData": {"studentStatus": "Egresado"}}
        mock_students.find_raw.return_value = graduate
        mock_employees.find_active.return_value = EMPLOYEE
        service = IdentityService(mock_students, mock_employees)

        result = await service.dual_status("85010112345")

        assert result["isGraduated"] is True
        assert result["hasDualOccupation"] is False
        assert result["studentData"] is graduate


class TestBuildCandidates:

    def test_preference_order(self) -> None:
        candidates = build_candidates("Juan Carlos", "Pérez", "Gómez")

        assert candidates[:4] == ["jperez", "juanp", "juanpere", "jpperez"]
        assert "jpg" in candidates
        assert len(candidates) == len(set(candidates))

    def test_accents_and_symbols_are_dropped(self) -> None:
        candidates = build_candidates("José", "Núñez", "O'Farrill")

        assert "jnunez" in candidates
        assert all(c.isalnum() and c.islower() for c in candidates)


@pytest.fixture(autouse=True)
def forget_offered_usernames():
    offered_usernames_cache.clear()
    yield
    offered_usernames_cache.clear()


class TestUsernameService:

    @pytest.mark.asyncio
    async def test_options_skip_taken_names(
        self, mock_directory, mock_students, mock_employees, make_entry
    ) -> None:
        # Arrange
        mock_employees.find_active.return_value = EMPLOYEE
        taken = make_entry(sAMAccountName="jperez")
        mock_directory.find_one.side_effect = lambda f, **_: taken if "jperez)" in f else None
        service = UsernameService(mock_directory, mock_students, mock_employees)

        # Act
        result = await service.generate_options("employee", "85010112345", count=2)

        # Assert
        assert result["options"] == ["juanp", "juanpere"]

    @pytest.mark.asyncio
    async def test_offered_options_are_not_repeated_until_reset(
        self, mock_directory, mock_students, mock_employees
    ) -> None:
        mock_employees.find_active.return_value = EMPLOYEE
        service = UsernameService(mock_directory, mock_students, mock_employees)

        first = await service.generate_options("employee", "85010112345", count=2)
        second = await service.generate_options("employee", "85010112345", count=2)
        after_reset = await service.generate_options("employee", "85010112345", count=2, reset=True)

        assert set(first["options"]).isdisjoint(second["options"])
        assert after_reset["options"] == first["options"]

    @pytest.mark.asyncio
    async def test_offered_options_expire(self, mock_directory, mock_students, mock_employees) -> None:
        mock_employees.find_active.return_value = EMPLOYEE
        offered = TTLCache(default_ttl=0)
        service = UsernameService(mock_directory, mock_students, mock_employees, offered=offered)

        first = await service.generate_options("employee", "85010112345", count=2)
        second = await service.generate_options("employee", "85010112345", count=2)

        assert second["options"] == first["options"]
        assert offered.stats()["keys"] == 0

    @pytest.mark.asyncio
    async def test_student_options_use_sigenu_names(
        self, mock_directory, mock_students, mock_employees
    ) -> None:
        mock_students.find_raw.return_value = RAW_STUDENT
        service = UsernameService(mock_directory, mock_students, mock_employees)

        result = await service.generate_options("student", "02031212345", count=1)

        assert result["options"] == ["aperez"]

    @pytest.mark.asyncio
    async def test_unknown_person(self, mock_directory, mock_students, mock_employees) -> None:
        service = UsernameService(mock_directory, mock_students, mock_employees)

        with pytest.raises(NotFoundError):
            await service.generate_options("student", "02031212345")

    @pytest.mark.asyncio
    async def test_invalid_user_type(self, mock_directory, mock_students, mock_employees) -> None:
        service = UsernameService(mock_directory, mock_students, mock_employees)

        with pytest.raises(ValidationError):
            await service.generate_options("visitor", "02031212345")

    @pytest.mark.asyncio
    async def test_check_available(self, mock_directory, mock_students, mock_employees) -> None:
        service = UsernameService(mock_directory, mock_students, mock_employees)

        assert await service.check_available("NewUser") == {"username": "newuser", "available": True}
        with pytest.raises(ValidationError):
            await service.check_available("a!")
