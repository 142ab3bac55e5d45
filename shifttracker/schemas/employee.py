"""Pydantic schemas for Employee management."""

from __future__ import annotations

from datetime import datetime

from pydantic import field_validator

from shifttracker.core.clock import ensure_utc
from shifttracker.models.employee import Role
from shifttracker.schemas.common import CamelModel


class EmployeeRequest(CamelModel):
    name: str
    username: str
    password: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        # Stored exactly as given; login matches it verbatim
        if not v.strip():
            raise ValueError("Username is required")
        if len(v) > 100:
            raise ValueError("Username must not exceed 100 characters")
        return v


class EmployeeCreate(EmployeeRequest):
    password: str

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Password is required")
        return v


class EmployeeUpdate(EmployeeRequest):
    pass


class EmployeeRead(CamelModel):
    id: int
    name: str
    username: str
    role: Role
    is_active: bool
    created_at: datetime | None

    @field_validator("created_at")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None
