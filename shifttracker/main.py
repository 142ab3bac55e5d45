"""
Shift Tracker — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `services/` package; `api/` only maps HTTP onto it.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shifttracker.api.api import api_router
from shifttracker.api.endpoints.auth import limiter
from shifttracker.core.config import settings
from shifttracker.core.exceptions import register_exception_handlers
from shifttracker.db.base import Base
from shifttracker.db.init_db import ensure_admin
from shifttracker.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from shifttracker.models.employee import Employee  # noqa: F401
from shifttracker.models.shift import Shift  # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    async with async_session_factory() as session:
        await ensure_admin(session)

    logger.info("Shift Tracker v%s started", settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Employee clock-in / clock-out and weekly hours",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Login throttling
    application.state.limiter = limiter

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)

    return application


app = create_app()
