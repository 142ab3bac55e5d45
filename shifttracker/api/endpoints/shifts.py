"""
Shift endpoints — the caller acts on their own shifts only.

The employee is always taken from the bearer token, never from the request.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from shifttracker.api.deps import (get_current_active_employee,
                                   get_report_service, get_shift_service)
from shifttracker.models.employee import Employee
from shifttracker.models.shift import Shift
from shifttracker.schemas.shift import ShiftRead, WeeklyHoursRead
from shifttracker.services.reports import ReportService
from shifttracker.services.shifts import ShiftService

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.post("/clock-in", response_model=ShiftRead, status_code=status.HTTP_201_CREATED)
async def clock_in(
    shifts: ShiftService = Depends(get_shift_service),
    current: Employee = Depends(get_current_active_employee),
) -> Shift:
    return await shifts.clock_in(current.id)


@router.post("/clock-out", response_model=ShiftRead)
async def clock_out(
    shifts: ShiftService = Depends(get_shift_service),
    current: Employee = Depends(get_current_active_employee),
) -> Shift:
    return await shifts.clock_out(current.id)


@router.get("/active", response_model=ShiftRead)
async def active_shift(
    shifts: ShiftService = Depends(get_shift_service),
    current: Employee = Depends(get_current_active_employee),
) -> Shift:
    shift = await shifts.get_active_shift(current.id)
    if shift is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active shift found")
    return shift


@router.get("/weekly-hours", response_model=WeeklyHoursRead)
async def weekly_hours(
    reports: ReportService = Depends(get_report_service),
    current: Employee = Depends(get_current_active_employee),
) -> WeeklyHoursRead:
    return WeeklyHoursRead.model_validate(await reports.weekly_hours(current.id))
