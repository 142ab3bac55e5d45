"""
FastAPI dependencies — database session, clock, auth guards and services.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from shifttracker.core.clock import Clock, utcnow
from shifttracker.core.exceptions import AccountInactive
from shifttracker.core.security import decode_access_token
from shifttracker.db.session import async_session_factory
from shifttracker.models.employee import Employee, Role
from shifttracker.schemas.auth import TokenPayload
from shifttracker.services.auth import AuthService
from shifttracker.services.employees import EmployeeService
from shifttracker.services.reports import ReportService
from shifttracker.services.shifts import ShiftService

# auto_error=False so a missing header yields our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


# ── Database session & clock ────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_clock() -> Clock:
    return utcnow


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_employee(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Employee:
    """Decode the bearer token and load the employee it names."""
    credentials_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exc

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise credentials_exc

    token_data = TokenPayload.model_validate(payload)
    if token_data.employee_id is None:
        raise credentials_exc

    employee = await db.get(Employee, token_data.employee_id)
    if employee is None:
        raise credentials_exc
    return employee


async def get_current_active_employee(
    current: Employee = Depends(get_current_employee),
) -> Employee:
    """Reject deactivated accounts that still hold a valid token."""
    if not current.is_active:
        raise AccountInactive()
    return current


async def require_admin(
    current: Employee = Depends(get_current_active_employee),
) -> Employee:
    """Only allow the ADMIN role to proceed."""
    if current.role is not Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current


# ── Services ────────────────────────────────────────────────────────
def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_employee_service(db: AsyncSession = Depends(get_db)) -> EmployeeService:
    return EmployeeService(db)


def get_shift_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ShiftService:
    return ShiftService(db, clock)


def get_report_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ReportService:
    return ReportService(db, clock)
