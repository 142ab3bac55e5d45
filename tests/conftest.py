"""
Shared test fixtures for the Shift Tracker test suite.

Every test gets its own in-memory aiosqlite database and a frozen clock.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shifttracker.api.deps import get_clock, get_db
from shifttracker.api.endpoints.auth import limiter
from shifttracker.core.security import create_access_token, get_password_hash
from shifttracker.db.base import Base
from shifttracker.main import app
from shifttracker.models.employee import Employee, Role

# Login throttling is exercised explicitly in test_auth
limiter.enabled = False

# Wednesday 2024-01-10 14:00 UTC
WEDNESDAY = datetime(2024, 1, 10, 14, 0, tzinfo=timezone.utc)
DEFAULT_PASSWORD = "s3cret-pass"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(WEDNESDAY)


@pytest.fixture
async def async_client(session_factory, clock) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app, the test DB and the frozen clock."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_employee(db_session):
    """Factory persisting an employee straight to the database."""

    async def _make(
        username: str,
        *,
        name: str | None = None,
        password: str = DEFAULT_PASSWORD,
        role: Role = Role.EMPLOYEE,
        is_active: bool = True,
    ) -> Employee:
        employee = Employee(
            name=name or username.title(),
            username=username,
            hashed_password=get_password_hash(password),
            role=role,
            is_active=is_active,
        )
        db_session.add(employee)
        await db_session.commit()
        return employee

    return _make


def auth_headers(employee: Employee) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(employee)}"}


@pytest.fixture
async def admin(make_employee) -> Employee:
    return await make_employee("admin", name="Admin", role=Role.ADMIN)


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return auth_headers(admin)
