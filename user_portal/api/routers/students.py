"""
Student API endpoints.

Routes: GET /students/{ci}

Dependencies: user_portal.application.services.student_service
System role: SIGENU student lookup HTTP API
"""

from typing import Any

from fastapi import APIRouter, Depends

from user_portal.api.deps.dependencies import get_student_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.student_service import StudentService

router = APIRouter(prefix="/students", tags=["students"])


@router.get("/{ci}")
@handle_portal_errors("student lookup")
async def get_student(
    ci: str,
    student_service: StudentService = Depends(get_student_service),
) -> dict[str, Any]:
    """
    Transformed SIGENU record for a CI.

    Raises:
        HTTPException(400): CI has no digits
        HTTPException(502): SIGENU failed or returned nothing
        HTTPException(503): SIGENU unreachable
    """
    return await student_service.get_student(ci)
