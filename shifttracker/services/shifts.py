"""
Shift lifecycle — clock-in / clock-out and the active-shift lookup.

Per employee the state machine is ``no active shift -> active shift ->
no active shift``; closed shifts stay behind as history and are never
touched again.

At most one open shift per employee is guaranteed twice over: clock-in
locks the employee row for the rest of the transaction, and the partial
unique index ``uq_shifts_one_open_per_employee`` rejects a second open row
should two transactions still race (e.g. on SQLite, which has no row locks).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shifttracker.core.clock import Clock, ensure_utc, utcnow
from shifttracker.core.exceptions import (AlreadyClockedIn, EmployeeNotFound,
                                          NoActiveShift)
from shifttracker.models.employee import Employee
from shifttracker.models.shift import Shift

logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")
_MINUTE = timedelta(minutes=1)


def compute_total_hours(clock_in: datetime, clock_out: datetime) -> Decimal:
    """Whole elapsed minutes expressed in hours, rounded half-up to 2 places.

    >>> compute_total_hours(datetime(2024, 1, 10, 9, 0), datetime(2024, 1, 10, 17, 31))
    Decimal('8.52')
    """
    minutes = (ensure_utc(clock_out) - ensure_utc(clock_in)) // _MINUTE
    return (Decimal(minutes) / Decimal(60)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


class ShiftService:
    def __init__(self, db: AsyncSession, clock: Clock = utcnow) -> None:
        self._db = db
        self._clock = clock

    async def _find_open_shift(self, employee_id: int, *, lock: bool = False) -> Shift | None:
        query = select(Shift).where(Shift.employee_id == employee_id, Shift.clock_out.is_(None))
        if lock:
            query = query.with_for_update(of=Shift)
        result = await self._db.execute(query)
        return result.scalar_one_or_none()

    async def get_active_shift(self, employee_id: int) -> Shift | None:
        return await self._find_open_shift(employee_id)

    async def clock_in(self, employee_id: int) -> Shift:
        now = ensure_utc(self._clock())

        result = await self._db.execute(
            select(Employee).where(Employee.id == employee_id).with_for_update()
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise EmployeeNotFound()

        if await self._find_open_shift(employee_id) is not None:
            raise AlreadyClockedIn()

        shift = Shift(employee=employee, clock_in=now)
        self._db.add(shift)
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            logger.warning("Concurrent clock-in rejected for employee %d", employee_id)
            raise AlreadyClockedIn() from None

        logger.info("Employee %d clocked in (shift %d)", employee_id, shift.id)
        return shift

    async def clock_out(self, employee_id: int) -> Shift:
        now = ensure_utc(self._clock())

        shift = await self._find_open_shift(employee_id, lock=True)
        if shift is None:
            raise NoActiveShift()

        shift.clock_out = now
        shift.total_hours = compute_total_hours(shift.clock_in, now)
        await self._db.commit()

        logger.info(
            "Employee %d clocked out (shift %d, %s h)", employee_id, shift.id, shift.total_hours
        )
        return shift
