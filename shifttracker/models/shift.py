"""
Shift model — one clock-in / clock-out interval of an employee.

A shift with ``clock_out IS NULL`` is *open*; the partial unique index
allows at most one open shift per employee.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, text
from sqlalchemy.orm import relationship

from shifttracker.db.base import Base


class Shift(Base):
    __tablename__ = "shifts"
    __table_args__ = (
        Index("ix_shifts_employee_clock_in", "employee_id", "clock_in"),
        Index(
            "uq_shifts_one_open_per_employee",
            "employee_id",
            unique=True,
            postgresql_where=text("clock_out IS NULL"),
            sqlite_where=text("clock_out IS NULL"),
        ),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    clock_in: datetime = Column(DateTime(timezone=True), nullable=False, index=True)  # type: ignore[assignment]
    clock_out: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    total_hours: Decimal | None = Column(Numeric(5, 2), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    employee = relationship("Employee", lazy="joined", innerjoin=True)

    @property
    def employee_name(self) -> str:
        return self.employee.name
