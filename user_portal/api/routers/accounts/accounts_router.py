"""
Account API endpoints.

Routes (public, onboarding):
- POST /accounts/students - Create a student account from SIGENU data
- POST /accounts/employees/{ci} - Create an employee account from HR data
- DELETE /accounts/{identifier} - Remove an account by CI or username

Routes (token):
- GET /accounts/profile - Caller's profile with backup email
- PUT /accounts/employee-id - Set the caller's CI
- PUT /accounts/backup-email - Set the caller's recovery address

Dependencies: user_portal.application.services.account_service
System role: Account lifecycle HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, status

from user_portal.api.deps.dependencies import get_account_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.account_service import AccountService
from user_portal.core.security import TokenUser, get_current_user
from user_portal.models.account import (
    AccountCreatedResponse,
    CreateEmployeeAccountRequest,
    CreateStudentAccountRequest,
    UpdateBackupEmailRequest,
    UpdateEmployeeIdRequest,
)

from .accounts_validators import validate_ci_path, validate_passwords_match

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post("/students", response_model=AccountCreatedResponse, status_code=status.HTTP_201_CREATED)
@handle_portal_errors("student account creation")
async def create_student_account(
    body: CreateStudentAccountRequest,
    account_service: AccountService = Depends(get_account_service),
) -> AccountCreatedResponse:
    """
    Create the directory account of an active student.

    Raises:
        HTTPException(400): Bad username, password or email
        HTTPException(404): No active student for the CI
        HTTPException(409): Username taken or CI already has an account
    """
    validate_passwords_match(body.password, body.confirmPassword)
    logger.info("Student account requested", extra={"ci": body.ci, "username": body.username})
    result = await account_service.create_student_account(
        body.ci, body.username, body.password, email=body.email
    )
    return AccountCreatedResponse(**result)


@router.post(
    "/employees/{ci}", response_model=AccountCreatedResponse, status_code=status.HTTP_201_CREATED
)
@handle_portal_errors("employee account creation")
async def create_employee_account(
    ci: str,
    body: CreateEmployeeAccountRequest,
    account_service: AccountService = Depends(get_account_service),
) -> AccountCreatedResponse:
    ci = validate_ci_path(ci)
    validate_passwords_match(body.password, body.confirmPassword)
    logger.info("Employee account requested", extra={"ci": ci, "username": body.username})
    result = await account_service.create_employee_account(ci, body.username, body.password)
    return AccountCreatedResponse(**result)


@router.get("/profile")
@handle_portal_errors("profile lookup")
async def get_profile(
    current_user: TokenUser = Depends(get_current_user),
    account_service: AccountService = Depends(get_account_service),
) -> dict[str, Any]:
    return await account_service.get_profile(current_user.sAMAccountName)


@router.put("/employee-id")
@handle_portal_errors("employee ID update")
async def update_employee_id(
    body: UpdateEmployeeIdRequest,
    current_user: TokenUser = Depends(get_current_user),
    account_service: AccountService = Depends(get_account_service),
) -> dict[str, Any]:
    return await account_service.update_employee_id(current_user.sAMAccountName, body.employeeID)


@router.put("/backup-email")
@handle_portal_errors("backup email update")
async def update_backup_email(
    body: UpdateBackupEmailRequest,
    current_user: TokenUser = Depends(get_current_user),
    account_service: AccountService = Depends(get_account_service),
) -> dict[str, Any]:
    return await account_service.update_backup_email(current_user.sAMAccountName, body.email, body.code)


@router.delete("/{identifier}")
@handle_portal_errors("account removal")
async def remove_account(
    identifier: str,
    account_service: AccountService = Depends(get_account_service),
) -> dict[str, Any]:
    """
    Raises:
        HTTPException(404): No account for the identifier
        HTTPException(409): Identifier matches several accounts
    """
    logger.info("Account removal requested", extra={"identifier": identifier})
    return await account_service.remove_account(identifier)
