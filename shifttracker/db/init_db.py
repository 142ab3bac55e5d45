"""
Startup data — guarantees an ADMIN account exists.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shifttracker.core.config import settings
from shifttracker.core.security import get_password_hash
from shifttracker.models.employee import Employee, Role

logger = logging.getLogger(__name__)


async def ensure_admin(session: AsyncSession) -> Employee | None:
    """Seed the configured admin unless an ADMIN-role employee already exists.

    Idempotent: returns the new admin, or ``None`` when nothing was created.
    """
    result = await session.execute(
        select(Employee.id).where(Employee.role == Role.ADMIN).limit(1)
    )
    if result.scalar_one_or_none() is not None:
        return None

    admin = Employee(
        name=settings.FIRST_ADMIN_NAME,
        username=settings.FIRST_ADMIN_USERNAME,
        hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
        role=Role.ADMIN,
        is_active=True,
    )
    session.add(admin)
    await session.commit()
    logger.info(
        "Default admin created: %s (password: <redacted>)",
        settings.FIRST_ADMIN_USERNAME,
    )
    return admin
