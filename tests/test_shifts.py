"""Tests for clock-in / clock-out and the caller's own shift views."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from conftest import WEDNESDAY, FrozenClock, auth_headers
from httpx import AsyncClient
from sqlalchemy import select

from shifttracker.core.exceptions import AlreadyClockedIn, EmployeeNotFound, NoActiveShift
from shifttracker.models.shift import Shift
from shifttracker.services.shifts import ShiftService


@pytest.fixture
async def worker(make_employee):
    return await make_employee("worker", name="Wanda Worker")


@pytest.fixture
def worker_headers(worker):
    return auth_headers(worker)


@pytest.mark.asyncio
async def test_clock_in_creates_open_shift(async_client: AsyncClient, worker, worker_headers):
    resp = await async_client.post("/api/shifts/clock-in", headers=worker_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["employeeId"] == worker.id
    assert data["employeeName"] == "Wanda Worker"
    assert data["clockIn"] == "2024-01-10T14:00:00Z"
    assert data["clockOut"] is None
    assert data["totalHours"] is None


@pytest.mark.asyncio
async def test_second_clock_in_rejected(async_client: AsyncClient, worker_headers):
    await async_client.post("/api/shifts/clock-in", headers=worker_headers)
    resp = await async_client.post("/api/shifts/clock-in", headers=worker_headers)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Already clocked in", "success": False}


@pytest.mark.asyncio
async def test_clock_out_computes_hours(async_client: AsyncClient, clock, worker_headers):
    clock.now = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
    await async_client.post("/api/shifts/clock-in", headers=worker_headers)

    clock.advance(hours=8, minutes=31)
    resp = await async_client.post("/api/shifts/clock-out", headers=worker_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["clockOut"] == "2024-01-10T17:31:00Z"
    assert data["totalHours"] == 8.52


@pytest.mark.asyncio
async def test_clock_out_without_open_shift(async_client: AsyncClient, worker_headers):
    resp = await async_client.post("/api/shifts/clock-out", headers=worker_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No active shift found"


@pytest.mark.asyncio
async def test_clock_in_again_after_clock_out(async_client: AsyncClient, clock, worker_headers):
    await async_client.post("/api/shifts/clock-in", headers=worker_headers)
    clock.advance(hours=2)
    await async_client.post("/api/shifts/clock-out", headers=worker_headers)
    clock.advance(minutes=30)
    resp = await async_client.post("/api/shifts/clock-in", headers=worker_headers)
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_active_shift(async_client: AsyncClient, clock, worker_headers):
    resp = await async_client.get("/api/shifts/active", headers=worker_headers)
    assert resp.status_code == 404

    created = (await async_client.post("/api/shifts/clock-in", headers=worker_headers)).json()
    resp = await async_client.get("/api/shifts/active", headers=worker_headers)
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]

    clock.advance(hours=1)
    await async_client.post("/api/shifts/clock-out", headers=worker_headers)
    resp = await async_client.get("/api/shifts/active", headers=worker_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_shifts_are_per_employee(async_client: AsyncClient, make_employee, worker_headers):
    other = await make_employee("other")
    await async_client.post("/api/shifts/clock-in", headers=worker_headers)
    resp = await async_client.post("/api/shifts/clock-in", headers=auth_headers(other))
    assert resp.status_code == 201
    assert (await async_client.get("/api/shifts/active", headers=auth_headers(other))).json()[
        "employeeId"
    ] == other.id


@pytest.mark.asyncio
async def test_weekly_hours_for_caller(async_client: AsyncClient, clock, worker, worker_headers):
    # Monday: 8h closed shift
    clock.now = datetime(2024, 1, 8, 9, 0, tzinfo=timezone.utc)
    await async_client.post("/api/shifts/clock-in", headers=worker_headers)
    clock.advance(hours=8)
    await async_client.post("/api/shifts/clock-out", headers=worker_headers)

    # Wednesday: still open
    clock.now = WEDNESDAY
    await async_client.post("/api/shifts/clock-in", headers=worker_headers)

    resp = await async_client.get("/api/shifts/weekly-hours", headers=worker_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["employeeId"] == worker.id
    assert data["employeeName"] == "Wanda Worker"
    assert data["totalWeeklyHours"] == 8.0
    # Newest clock-in first; the open shift is listed but adds nothing
    assert [s["clockOut"] is None for s in data["shifts"]] == [True, False]


@pytest.mark.asyncio
async def test_weekly_hours_ignores_other_weeks(
    async_client: AsyncClient, worker, worker_headers, db_session
):
    db_session.add_all(
        [
            Shift(
                employee_id=worker.id,
                clock_in=datetime(2024, 1, 7, 23, 0, tzinfo=timezone.utc),  # previous Sunday
                clock_out=datetime(2024, 1, 8, 3, 0, tzinfo=timezone.utc),
                total_hours=Decimal("4.00"),
            ),
            Shift(
                employee_id=worker.id,
                clock_in=datetime(2024, 1, 14, 20, 0, tzinfo=timezone.utc),  # this Sunday
                clock_out=datetime(2024, 1, 14, 22, 30, tzinfo=timezone.utc),
                total_hours=Decimal("2.50"),
            ),
        ]
    )
    await db_session.commit()

    data = (await async_client.get("/api/shifts/weekly-hours", headers=worker_headers)).json()
    assert data["totalWeeklyHours"] == 2.5
    assert len(data["shifts"]) == 1


# ── Service level ───────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_clock_in_unknown_employee(db_session):
    with pytest.raises(EmployeeNotFound):
        await ShiftService(db_session, FrozenClock(WEDNESDAY)).clock_in(9999)


@pytest.mark.asyncio
async def test_clock_out_unknown_employee(db_session):
    with pytest.raises(NoActiveShift):
        await ShiftService(db_session, FrozenClock(WEDNESDAY)).clock_out(9999)


@pytest.mark.asyncio
async def test_get_active_shift_none(db_session, worker):
    assert await ShiftService(db_session).get_active_shift(worker.id) is None


@pytest.mark.asyncio
async def test_open_shift_index_catches_racing_clock_in(db_session, worker, monkeypatch):
    """A clock-in that slips past the open-shift check still cannot create a second open shift."""
    worker_id = worker.id  # the rollback below expires every loaded instance
    service = ShiftService(db_session, FrozenClock(WEDNESDAY))
    await service.clock_in(worker_id)

    async def _missed(self, employee_id, *, lock=False):
        return None

    monkeypatch.setattr(ShiftService, "_find_open_shift", _missed)
    with pytest.raises(AlreadyClockedIn):
        await service.clock_in(worker_id)

    result = await db_session.execute(
        select(Shift).where(Shift.employee_id == worker_id, Shift.clock_out.is_(None))
    )
    assert len(result.scalars().all()) == 1
