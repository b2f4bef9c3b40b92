"""
sourcing_portal.db.init_db

Schema bootstrap.

Responsibilities:
- Create tables that do not exist yet (idempotent).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from sourcing_portal.db import models  # noqa: F401  # registers tables on Base.metadata
from sourcing_portal.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
