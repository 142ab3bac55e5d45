"""
Domain errors and global exception handlers — prevents stack-trace leakage to clients.

Every error leaves the API as ``{"detail": ..., "success": false}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


# ── Domain errors ───────────────────────────────────────────────────
class ShiftTrackerError(Exception):
    """Base class for business-rule failures surfaced to API clients."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Request could not be processed"

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class InvalidCredentials(ShiftTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid credentials"


class AccountInactive(ShiftTrackerError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Account is inactive"


class UsernameTaken(ShiftTrackerError):
    detail = "Username already exists"


class CannotDeleteAdmin(ShiftTrackerError):
    detail = "Cannot delete admin user"


class EmployeeHasShifts(ShiftTrackerError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Employee has recorded shifts and cannot be deleted"


class AlreadyClockedIn(ShiftTrackerError):
    detail = "Already clocked in"


class NoActiveShift(ShiftTrackerError):
    detail = "No active shift found"


class NotFound(ShiftTrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class EmployeeNotFound(NotFound):
    detail = "Employee not found"


# ── Handlers ────────────────────────────────────────────────────────
def _error_response(status_code: int, detail: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "success": False},
    )


async def _domain_error_handler(_request: Request, exc: ShiftTrackerError) -> JSONResponse:
    return _error_response(exc.status_code, exc.detail)


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    response = _error_response(exc.status_code, exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _rate_limit_handler(_request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded: %s", exc.detail)
    return _error_response(status.HTTP_429_TOO_MANY_REQUESTS, f"Rate limit exceeded: {exc.detail}")


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return _error_response(status.HTTP_409_CONFLICT, "Database constraint violation")


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal database error")


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(ShiftTrackerError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
