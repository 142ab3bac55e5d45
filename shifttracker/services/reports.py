"""
Weekly hour reports over the Monday–Sunday window containing "now".

Shifts are attributed to the week their clock-in falls in; open shifts are
listed but add nothing to the total.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from decimal import Decimal
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shifttracker.core.clock import Clock, utcnow
from shifttracker.core.config import settings
from shifttracker.core.exceptions import EmployeeNotFound
from shifttracker.models.employee import Employee, Role
from shifttracker.models.shift import Shift

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeeklySummary:
    employee_id: int
    employee_name: str
    total_weekly_hours: Decimal
    shifts: list[Shift] = field(default_factory=list)


def current_week_range(now: datetime) -> tuple[datetime, datetime]:
    """Return (Monday 00:00:00.000000, Sunday 23:59:59.999999) around *now*.

    Both ends are inclusive and carry *now*'s tzinfo.
    """
    monday = (now - timedelta(days=now.weekday())).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    sunday = (monday + timedelta(days=6)).replace(
        hour=23, minute=59, second=59, microsecond=999999
    )
    return monday, sunday


def sum_closed_hours(shifts: list[Shift]) -> Decimal:
    return sum(
        (s.total_hours for s in shifts if s.total_hours is not None),
        Decimal("0.00"),
    )


class ReportService:
    def __init__(
        self,
        db: AsyncSession,
        clock: Clock = utcnow,
        tz: tzinfo | None = None,
    ) -> None:
        self._db = db
        self._clock = clock
        self._tz = tz if tz is not None else ZoneInfo(settings.TIMEZONE)

    def _week_bounds(self) -> tuple[datetime, datetime]:
        """Current week in the local zone, converted to UTC for querying."""
        start, end = current_week_range(self._clock().astimezone(self._tz))
        return start.astimezone(timezone.utc), end.astimezone(timezone.utc)

    async def weekly_hours(self, employee_id: int) -> WeeklySummary:
        employee = await self._db.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFound()

        start, end = self._week_bounds()
        result = await self._db.execute(
            select(Shift)
            .where(
                Shift.employee_id == employee_id,
                Shift.clock_in >= start,
                Shift.clock_in <= end,
            )
            .order_by(Shift.clock_in.desc())
        )
        shifts = list(result.scalars().all())

        return WeeklySummary(
            employee_id=employee.id,
            employee_name=employee.name,
            total_weekly_hours=sum_closed_hours(shifts),
            shifts=shifts,
        )

    async def all_employees_weekly_hours(self) -> list[WeeklySummary]:
        """One summary per EMPLOYEE-role account; admins are left out."""
        start, end = self._week_bounds()
        result = await self._db.execute(
            select(Shift)
            .where(Shift.clock_in >= start, Shift.clock_in <= end)
            .order_by(Shift.employee_id, Shift.clock_in.desc())
        )
        by_employee: dict[int, list[Shift]] = defaultdict(list)
        for shift in result.scalars().all():
            by_employee[shift.employee_id].append(shift)

        employees = await self._db.execute(select(Employee).order_by(Employee.id))

        summaries = []
        for employee in employees.scalars().all():
            if employee.role is Role.ADMIN:
                continue
            shifts = by_employee.get(employee.id, [])
            summaries.append(
                WeeklySummary(
                    employee_id=employee.id,
                    employee_name=employee.name,
                    total_weekly_hours=sum_closed_hours(shifts),
                    shifts=shifts,
                )
            )
        logger.debug("Weekly report %s..%s: %d employees", start, end, len(summaries))
        return summaries
