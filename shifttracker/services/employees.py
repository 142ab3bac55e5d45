"""
Employee management — admin-side CRUD over employee records.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shifttracker.core.exceptions import (CannotDeleteAdmin, EmployeeHasShifts,
                                          NotFound, UsernameTaken)
from shifttracker.core.security import get_password_hash
from shifttracker.models.employee import Employee, Role
from shifttracker.models.shift import Shift

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def _username_exists(self, username: str) -> bool:
        result = await self._db.execute(
            select(Employee.id).where(Employee.username == username).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def _commit_username_change(self, username: str) -> None:
        """Commit, reporting a lost race on the unique username index as UsernameTaken."""
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            logger.warning("Concurrent write claimed username %r", username)
            raise UsernameTaken() from None

    async def get_employee(self, employee_id: int) -> Employee:
        employee = await self._db.get(Employee, employee_id)
        if employee is None:
            raise NotFound("Employee not found")
        return employee

    async def list_employees(self) -> list[Employee]:
        result = await self._db.execute(select(Employee).order_by(Employee.id))
        return list(result.scalars().all())

    async def create_employee(self, name: str, username: str, password: str) -> Employee:
        """Create an active EMPLOYEE-role account."""
        if await self._username_exists(username):
            raise UsernameTaken()

        employee = Employee(
            name=name,
            username=username,
            hashed_password=get_password_hash(password),
            role=Role.EMPLOYEE,
            is_active=True,
        )
        self._db.add(employee)
        await self._commit_username_change(username)
        logger.info("Created employee %d (%s)", employee.id, employee.username)
        return employee

    async def update_employee(
        self,
        employee_id: int,
        name: str,
        username: str,
        password: str | None = None,
    ) -> Employee:
        """Rename an employee and optionally reset the password.

        A blank or whitespace-only password leaves the stored hash untouched.
        Role and active flag are never changed here.
        """
        employee = await self.get_employee(employee_id)

        if employee.username != username and await self._username_exists(username):
            raise UsernameTaken()

        employee.name = name
        employee.username = username
        if password is not None and password.strip():
            employee.hashed_password = get_password_hash(password.strip())

        await self._commit_username_change(username)
        logger.info("Updated employee %d", employee_id)
        return employee

    async def delete_employee(self, employee_id: int) -> None:
        employee = await self.get_employee(employee_id)

        if employee.role is Role.ADMIN:
            raise CannotDeleteAdmin()

        shift_count = await self._db.scalar(
            select(func.count(Shift.id)).where(Shift.employee_id == employee_id)
        )
        if shift_count:
            raise EmployeeHasShifts()

        await self._db.delete(employee)
        await self._db.commit()
        logger.info("Deleted employee %d (%s)", employee_id, employee.username)
