"""
sourcing_portal.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide a plain-text banner at `/`.
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from sourcing_portal.api.deps import db_session

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Sourcing portal backend is running."


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}
