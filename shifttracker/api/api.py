"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from shifttracker.api.endpoints import admin, auth, health, shifts

api_router = APIRouter()

# Login & profile
api_router.include_router(auth.router)

# Employee management & company-wide report (admin only)
api_router.include_router(admin.router)

# Clock-in / clock-out & personal weekly hours
api_router.include_router(shifts.router)

api_router.include_router(health.router)
