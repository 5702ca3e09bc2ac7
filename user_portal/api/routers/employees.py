"""
Employee API endpoints.

Routes:
- GET /employees/ci/{ci}
- GET /employees/name?first=&last1=&last2=
- GET /employees/cost-center/{cost_center_id}
- GET /employees/terminated
- GET /employees/city/{city}

Dependencies: user_portal.application.services.employee_service
System role: HR employee lookup HTTP API
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from user_portal.api.deps.dependencies import get_employee_service
from user_portal.api.routers.router_utils import handle_portal_errors
from user_portal.application.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


def _listing(employees: list[dict[str, Any]]) -> dict[str, Any]:
    return {"employees": employees, "total": len(employees)}


@router.get("/ci/{ci}")
@handle_portal_errors("employee lookup")
async def get_by_ci(
    ci: str,
    employee_service: EmployeeService = Depends(get_employee_service),
) -> dict[str, Any]:
    return await employee_service.get_by_ci(ci)


@router.get("/name")
@handle_portal_errors("employee name search")
async def search_by_name(
    first: str = Query(..., min_length=1),
    last1: str = Query(..., min_length=1),
    last2: str = Query(..., min_length=1),
    employee_service: EmployeeService = Depends(get_employee_service),
) -> dict[str, Any]:
    return _listing(await employee_service.search_by_name(first, last1, last2))


@router.get("/cost-center/{cost_center_id}")
@handle_portal_errors("employee cost center lookup")
async def by_cost_center(
    cost_center_id: str,
    employee_service: EmployeeService = Depends(get_employee_service),
) -> dict[str, Any]:
    return _listing(await employee_service.by_cost_center(cost_center_id))


@router.get("/terminated")
@handle_portal_errors("terminated employee listing")
async def terminated(
    employee_service: EmployeeService = Depends(get_employee_service),
) -> dict[str, Any]:
    return _listing(await employee_service.terminated())


@router.get("/city/{city}")
@handle_portal_errors("employee city lookup")
async def by_city(
    city: str,
    employee_service: EmployeeService = Depends(get_employee_service),
) -> dict[str, Any]:
    return _listing(await employee_service.by_city(city))
