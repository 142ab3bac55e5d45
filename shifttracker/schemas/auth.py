"""Pydantic schemas for login and JWT payloads."""

from __future__ import annotations

from pydantic import BaseModel

from shifttracker.models.employee import Role
from shifttracker.schemas.common import CamelModel


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(CamelModel):
    token: str
    employee_id: int
    name: str
    username: str
    role: Role


class TokenPayload(BaseModel):
    sub: str | None = None
    role: str | None = None
    employee_id: int | None = None
    type: str | None = None
