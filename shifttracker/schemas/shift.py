"""Pydantic schemas for shifts and weekly summaries."""

from __future__ import annotations

from datetime import datetime

from pydantic import field_validator

from shifttracker.core.clock import ensure_utc
from shifttracker.schemas.common import CamelModel, Hours


class ShiftRead(CamelModel):
    id: int
    employee_id: int
    employee_name: str
    clock_in: datetime
    clock_out: datetime | None
    total_hours: Hours | None

    @field_validator("clock_in", "clock_out")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None


class WeeklyHoursRead(CamelModel):
    employee_id: int
    employee_name: str
    total_weekly_hours: Hours
    shifts: list[ShiftRead]
