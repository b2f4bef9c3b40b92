"""
tests.conftest

Shared fixtures: an in-process app backed by a throwaway SQLite file, an httpx client,
and registered officer/vendor accounts.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from helpers import make_settings, register, running_client

from sourcing_portal.settings import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest_asyncio.fixture
async def app_client(settings: Settings) -> AsyncIterator[tuple[FastAPI, httpx.AsyncClient]]:
    async with running_client(settings) as pair:
        yield pair


@pytest.fixture
def app(app_client: tuple[FastAPI, httpx.AsyncClient]) -> FastAPI:
    return app_client[0]


@pytest.fixture
def client(app_client: tuple[FastAPI, httpx.AsyncClient]) -> httpx.AsyncClient:
    return app_client[1]


@pytest_asyncio.fixture
async def officer(client: httpx.AsyncClient) -> dict[str, str]:
    return await register(client, "officer@hospital.org", "procurement", "Olivia Officer")


@pytest_asyncio.fixture
async def other_officer(client: httpx.AsyncClient) -> dict[str, str]:
    return await register(client, "second@hospital.org", "procurement", "Sam Second")


@pytest_asyncio.fixture
async def vendor(client: httpx.AsyncClient) -> dict[str, str]:
    return await register(client, "sales@medsupply.com", "vendor", "MedSupply Ltd")


@pytest_asyncio.fixture
async def other_vendor(client: httpx.AsyncClient) -> dict[str, str]:
    return await register(client, "bids@carecorp.com", "vendor", "CareCorp")
