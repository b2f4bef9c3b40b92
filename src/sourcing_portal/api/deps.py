"""
sourcing_portal.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and services.
- Encapsulate app.state access patterns (sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sourcing_portal.services.account_service import AccountService
from sourcing_portal.services.sourcing_service import SourcingService
from sourcing_portal.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app factory pins the Settings it was built with on app.state.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created on app startup in `sourcing_portal.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit points are owned by the service layer.
    async with session_factory() as session:
        yield session


def sourcing_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> SourcingService:
    return SourcingService(session=session, settings=settings)


def account_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AccountService:
    return AccountService(session=session, settings=settings)
