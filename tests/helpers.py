"""
tests.helpers

Request builders shared by the API tests.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Any

import httpx
from fastapi import FastAPI

from sourcing_portal.api.app import create_app
from sourcing_portal.db.models import RequestStatus, SourcingRequest
from sourcing_portal.settings import Settings


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "env": "test",
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'sourcing.db'}",
        "jwt_secret": "test-secret",
        "bcrypt_rounds": 4,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


@asynccontextmanager
async def running_client(
    settings: Settings,
) -> AsyncIterator[tuple[FastAPI, httpx.AsyncClient]]:
    app = create_app(settings=settings)
    # httpx's ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield app, client


def today() -> date:
    return datetime.now(tz=UTC).date()


def days_from_today(days: int) -> str:
    return (today() + timedelta(days=days)).isoformat()


async def register(
    client: httpx.AsyncClient, email: str, role: str, name: str | None = None
) -> dict[str, str]:
    body = {"name": name, "email": email, "password": "pw-123", "role": role}
    r = await client.post("/register", json=body)
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


async def create_request(
    client: httpx.AsyncClient, headers: dict[str, str], **overrides: Any
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "title": "Hospital Beds Procurement",
        "category": "Medical Equipment",
        "description": "Modern hospital beds",
        "quantity": 20,
        "deadline": days_from_today(30),
        "requirements": "CE certification required",
    }
    body.update(overrides)
    r = await client.post("/api/sourcing-requests", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


async def submit_proposal(
    client: httpx.AsyncClient, headers: dict[str, str], request_id: str, **overrides: Any
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "requestId": request_id,
        "price": 1250.5,
        "deliveryDate": days_from_today(10),
        "notes": "Includes installation",
    }
    body.update(overrides)
    r = await client.post("/api/proposals", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


async def force_expired_open(app: FastAPI, request_id: str) -> None:
    # A request whose deadline passed while nobody was looking at it.
    async with app.state.sessionmaker() as session:
        req = await session.get(SourcingRequest, request_id)
        req.deadline = today() - timedelta(days=2)
        req.status = RequestStatus.open
        await session.commit()
