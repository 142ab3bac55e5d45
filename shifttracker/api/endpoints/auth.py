"""
Auth endpoints — login & current profile.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from shifttracker.api.deps import get_auth_service, get_current_active_employee
from shifttracker.core.config import settings
from shifttracker.core.exceptions import ShiftTrackerError
from shifttracker.models.employee import Employee
from shifttracker.schemas.auth import LoginRequest, LoginResponse
from shifttracker.schemas.employee import EmployeeRead
from shifttracker.services.auth import AuthService

# Rate limiter — keyed by client IP
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Exchange username/password for a signed bearer token."""
    try:
        result = await auth.login(body.username, body.password)
    except ShiftTrackerError:
        raise
    except Exception:
        # Anything but a credential problem is masked from the caller
        logger.exception("Login failed for %r", body.username)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed",
        ) from None
    return LoginResponse.model_validate(result)


@router.get("/me", response_model=EmployeeRead)
async def read_current_employee(
    current: Employee = Depends(get_current_active_employee),
) -> Employee:
    """Return profile of the currently authenticated employee."""
    return current
