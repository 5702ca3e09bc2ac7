"""
Account models and schemas.

Request schemas for identity checks, username selection and account
creation or maintenance.

Dependencies: pydantic
System role: Account API contracts
"""

from pydantic import BaseModel, Field


class VerifyIdentityRequest(BaseModel):
    ci: str = Field(..., min_length=1, max_length=20, description="Identity card number")


class CheckUsernameRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)


class CreateStudentAccountRequest(BaseModel):
    """Request schema for creating a student account."""

    ci: str = Field(..., min_length=1, max_length=20)
    username: str = Field(..., min_length=3, max_length=20)
    password: str = Field(..., min_length=1)
    confirmPassword: str | None = None
    email: str | None = Field(None, description="Optional backup email")


class CreateEmployeeAccountRequest(BaseModel):
    """Request schema for creating an employee account; the CI is in the path."""

    username: str = Field(..., min_length=3, max_length=20)
    password: str = Field(..., min_length=1)
    confirmPassword: str | None = None


class UpdateEmployeeIdRequest(BaseModel):
    employeeID: str = Field(..., min_length=1, max_length=20)


class UpdateBackupEmailRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    code: str = Field(..., min_length=1, max_length=12)


class AccountCreatedResponse(BaseModel):
    """Response schema for account creation."""

    success: bool = True
    message: str
    sAMAccountName: str
    userPrincipalName: str
    dn: str
