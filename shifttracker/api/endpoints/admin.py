"""
Admin endpoints — employee management and the company-wide weekly report.

Every route requires an active ADMIN token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from shifttracker.api.deps import (get_employee_service, get_report_service,
                                   require_admin)
from shifttracker.models.employee import Employee
from shifttracker.schemas.employee import (EmployeeCreate, EmployeeRead,
                                           EmployeeUpdate)
from shifttracker.schemas.shift import WeeklyHoursRead
from shifttracker.services.employees import EmployeeService
from shifttracker.services.reports import ReportService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/employees", response_model=EmployeeRead, status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeCreate,
    employees: EmployeeService = Depends(get_employee_service),
    _admin: Employee = Depends(require_admin),
) -> Employee:
    return await employees.create_employee(body.name, body.username, body.password)


@router.get("/employees", response_model=list[EmployeeRead])
async def list_employees(
    employees: EmployeeService = Depends(get_employee_service),
    _admin: Employee = Depends(require_admin),
) -> list[Employee]:
    return await employees.list_employees()


@router.get("/employees/{employee_id}", response_model=EmployeeRead)
async def get_employee(
    employee_id: int,
    employees: EmployeeService = Depends(get_employee_service),
    _admin: Employee = Depends(require_admin),
) -> Employee:
    return await employees.get_employee(employee_id)


@router.put("/employees/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    body: EmployeeUpdate,
    employees: EmployeeService = Depends(get_employee_service),
    _admin: Employee = Depends(require_admin),
) -> Employee:
    """Update name / username; the password changes only when a non-blank one is sent."""
    return await employees.update_employee(employee_id, body.name, body.username, body.password)


@router.delete("/employees/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: int,
    employees: EmployeeService = Depends(get_employee_service),
    _admin: Employee = Depends(require_admin),
) -> Response:
    """Hard-delete an EMPLOYEE-role account that has no shift history."""
    await employees.delete_employee(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/weekly-hours", response_model=list[WeeklyHoursRead])
async def all_employees_weekly_hours(
    reports: ReportService = Depends(get_report_service),
    _admin: Employee = Depends(require_admin),
) -> list[WeeklyHoursRead]:
    summaries = await reports.all_employees_weekly_hours()
    return [WeeklyHoursRead.model_validate(s) for s in summaries]
