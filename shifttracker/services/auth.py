"""
Authentication — credential check and token issuance.

Stateless: nothing is stored per session, the signed token is the session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shifttracker.core.exceptions import AccountInactive, InvalidCredentials
from shifttracker.core.security import create_access_token, verify_password
from shifttracker.models.employee import Employee, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    employee_id: int
    name: str
    username: str
    role: Role


class AuthService:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def login(self, username: str, password: str) -> LoginResult:
        result = await self._db.execute(select(Employee).where(Employee.username == username))
        employee = result.scalar_one_or_none()
        if employee is None:
            logger.warning("Login failed: unknown username %r", username)
            raise InvalidCredentials()

        if not employee.is_active:
            logger.warning("Login refused: account %r is inactive", username)
            raise AccountInactive()

        if not verify_password(password, employee.hashed_password):
            logger.warning("Login failed: bad password for %r", username)
            raise InvalidCredentials()

        logger.info("Employee %d (%s) logged in", employee.id, employee.username)
        return LoginResult(
            token=create_access_token(employee),
            employee_id=employee.id,
            name=employee.name,
            username=employee.username,
            role=employee.role,
        )
