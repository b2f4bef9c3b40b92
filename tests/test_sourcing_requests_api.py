from __future__ import annotations

from datetime import date

import httpx
import pytest
from fastapi import FastAPI
from helpers import (
    create_request,
    days_from_today,
    force_expired_open,
    make_settings,
    register,
    running_client,
    submit_proposal,
    today,
)

from sourcing_portal.db.models import RequestStatus, SourcingRequest


@pytest.mark.asyncio
async def test_create_request_is_open_and_owned_by_caller(
    client: httpx.AsyncClient, officer: dict[str, str]
) -> None:
    body = await create_request(client, officer)
    assert body["status"] == "Open"
    assert body["createdBy"] == "officer@hospital.org"
    assert body["category"] == "Medical Equipment"
    assert body["quantity"] == 20
    assert body["proposals"] == []
    assert body["id"].isdigit()
    assert "createdAt" in body


@pytest.mark.asyncio
async def test_create_with_past_deadline_starts_closed(
    client: httpx.AsyncClient, officer: dict[str, str]
) -> None:
    body = await create_request(client, officer, deadline=days_from_today(-1))
    assert body["status"] == "Closed"


@pytest.mark.asyncio
async def test_create_validates_category_and_quantity(
    client: httpx.AsyncClient, officer: dict[str, str]
) -> None:
    r = await client.post(
        "/api/sourcing-requests",
        json={"title": "X", "category": "Furniture", "quantity": 1, "deadline": "2099-01-01"},
        headers=officer,
    )
    assert r.status_code == 400
    assert "category" in r.json()["message"]

    r = await client.post(
        "/api/sourcing-requests",
        json={"title": "X", "category": "Supplies", "quantity": 0, "deadline": "2099-01-01"},
        headers=officer,
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_list_get_and_filters(
    client: httpx.AsyncClient,
    officer: dict[str, str],
    other_officer: dict[str, str],
    vendor: dict[str, str],
) -> None:
    mine = await create_request(client, officer, title="Lab kits", category="Supplies")
    theirs = await create_request(client, other_officer, title="Sterilizers")
    closed = await create_request(client, officer, deadline=days_from_today(-3))

    r = await client.get("/api/sourcing-requests", headers=vendor)
    assert r.status_code == 200
    assert r.headers["cache-control"].startswith("no-store")
    assert {x["id"] for x in r.json()} == {mine["id"], theirs["id"], closed["id"]}

    r = await client.get("/api/sourcing-requests", params={"mine": "true"}, headers=officer)
    assert {x["id"] for x in r.json()} == {mine["id"], closed["id"]}

    r = await client.get("/api/sourcing-requests", params={"status": "Open"}, headers=vendor)
    assert {x["id"] for x in r.json()} == {mine["id"], theirs["id"]}

    r = await client.get(
        "/api/sourcing-requests", params={"category": "Supplies"}, headers=vendor
    )
    assert [x["id"] for x in r.json()] == [mine["id"]]

    r = await client.get(f"/api/sourcing-requests/{theirs['id']}", headers=vendor)
    assert r.status_code == 200
    assert r.json()["title"] == "Sterilizers"

    r = await client.get("/api/sourcing-requests/does-not-exist", headers=vendor)
    assert r.status_code == 404
    assert r.json()["message"] == "Sourcing request not found"


@pytest.mark.asyncio
async def test_update_only_touches_editable_fields(
    client: httpx.AsyncClient, officer: dict[str, str]
) -> None:
    created = await create_request(client, officer)
    new_deadline = days_from_today(45)

    r = await client.put(
        f"/api/sourcing-requests/{created['id']}",
        json={
            "title": "ICU beds",
            "quantity": 8,
            "deadline": new_deadline,
            "createdBy": "someone@else.org",
            "status": "Closed",
        },
        headers=officer,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "ICU beds"
    assert body["quantity"] == 8
    assert body["deadline"] == new_deadline
    assert body["description"] == created["description"]
    assert body["createdBy"] == "officer@hospital.org"
    assert body["status"] == "Open"


@pytest.mark.asyncio
async def test_update_moving_deadline_into_the_past_closes_request(
    client: httpx.AsyncClient, officer: dict[str, str]
) -> None:
    created = await create_request(client, officer)
    r = await client.put(
        f"/api/sourcing-requests/{created['id']}",
        json={"deadline": days_from_today(-1)},
        headers=officer,
    )
    assert r.json()["status"] == "Closed"


@pytest.mark.asyncio
async def test_only_creator_can_edit_or_delete(
    client: httpx.AsyncClient, officer: dict[str, str], other_officer: dict[str, str]
) -> None:
    created = await create_request(client, officer)

    r = await client.put(
        f"/api/sourcing-requests/{created['id']}", json={"title": "Hijack"}, headers=other_officer
    )
    assert r.status_code == 403
    assert r.json()["message"] == "Not authorized to edit this request"

    r = await client.delete(f"/api/sourcing-requests/{created['id']}", headers=other_officer)
    assert r.status_code == 403
    assert r.json()["message"] == "Not authorized to delete this request"

    r = await client.put(
        f"/api/sourcing-requests/{created['id']}/status",
        json={"status": "Closed"},
        headers=other_officer,
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_manual_close_and_reopen(
    client: httpx.AsyncClient, officer: dict[str, str]
) -> None:
    created = await create_request(client, officer)
    url = f"/api/sourcing-requests/{created['id']}/status"

    r = await client.put(url, json={"status": "Closed"}, headers=officer)
    assert r.status_code == 200
    assert r.json()["status"] == "Closed"

    r = await client.put(url, json={"status": "Open"}, headers=officer)
    assert r.status_code == 200
    assert r.json()["status"] == "Open"

    r = await client.put(url, json={"status": "Archived"}, headers=officer)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_expired_request_cannot_be_reopened(
    client: httpx.AsyncClient, officer: dict[str, str]
) -> None:
    created = await create_request(client, officer, deadline=days_from_today(-1))
    r = await client.put(
        f"/api/sourcing-requests/{created['id']}/status",
        json={"status": "Open"},
        headers=officer,
    )
    assert r.status_code == 400
    assert "deadline has passed" in r.json()["message"]


@pytest.mark.asyncio
async def test_reads_auto_close_expired_requests(
    app: FastAPI, client: httpx.AsyncClient, officer: dict[str, str]
) -> None:
    listed = await create_request(client, officer, title="Listed")
    fetched = await create_request(client, officer, title="Fetched")
    await force_expired_open(app, listed["id"])
    await force_expired_open(app, fetched["id"])

    r = await client.get(f"/api/sourcing-requests/{fetched['id']}", headers=officer)
    assert r.json()["status"] == "Closed"

    r = await client.get("/api/sourcing-requests", headers=officer)
    statuses = {x["id"]: x["status"] for x in r.json()}
    assert statuses[listed["id"]] == "Closed"

    async with app.state.sessionmaker() as session:
        stored = await session.get(SourcingRequest, listed["id"])
        assert stored.status is RequestStatus.closed


@pytest.mark.asyncio
async def test_delete_removes_request_and_its_proposals(
    client: httpx.AsyncClient, officer: dict[str, str], vendor: dict[str, str]
) -> None:
    created = await create_request(client, officer)
    proposal = await submit_proposal(client, vendor, created["id"])
    r = await client.put(
        f"/api/proposals/{proposal['id']}/status", json={"status": "Shortlisted"}, headers=officer
    )
    assert r.status_code == 200

    r = await client.delete(f"/api/sourcing-requests/{created['id']}", headers=officer)
    assert r.status_code == 200
    assert r.json()["message"] == "Request deleted successfully"

    r = await client.get(f"/api/sourcing-requests/{created['id']}", headers=officer)
    assert r.status_code == 404

    r = await client.get("/api/proposals/vendor", headers=vendor)
    assert r.json() == []

    r = await client.put(
        f"/api/proposals/{proposal['id']}/status", json={"status": "Pending"}, headers=officer
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_request_proposals_are_creator_only_and_enriched(
    client: httpx.AsyncClient,
    officer: dict[str, str],
    other_officer: dict[str, str],
    vendor: dict[str, str],
) -> None:
    created = await create_request(client, officer, title="Monitors", category="Services")
    await submit_proposal(client, vendor, created["id"])

    r = await client.get(f"/api/sourcing-requests/{created['id']}/proposals", headers=officer)
    assert r.status_code == 200
    [p] = r.json()
    assert p["requestTitle"] == "Monitors"
    assert p["requestCategory"] == "Services"
    assert p["vendorId"] == "sales@medsupply.com"

    r = await client.get(
        f"/api/sourcing-requests/{created['id']}/proposals", headers=other_officer
    )
    assert r.status_code == 403
    assert r.json()["message"] == "Not authorized to view proposals"


@pytest.mark.asyncio
async def test_vendors_only_see_their_own_bids_on_a_request(
    client: httpx.AsyncClient,
    officer: dict[str, str],
    vendor: dict[str, str],
    other_vendor: dict[str, str],
) -> None:
    created = await create_request(client, officer)
    await submit_proposal(client, vendor, created["id"], price=100)
    await submit_proposal(client, other_vendor, created["id"], price=90)

    r = await client.get(f"/api/sourcing-requests/{created['id']}", headers=vendor)
    assert [p["price"] for p in r.json()["proposals"]] == [100]

    r = await client.get(f"/api/sourcing-requests/{created['id']}", headers=officer)
    assert sorted(p["price"] for p in r.json()["proposals"]) == [90, 100]


@pytest.mark.asyncio
async def test_reset_data_seeds_ten_open_requests(
    client: httpx.AsyncClient, officer: dict[str, str]
) -> None:
    await create_request(client, officer, title="Old request")

    r = await client.post("/api/reset-data", headers=officer)
    assert r.status_code == 200
    seeded = r.json()["requests"]
    assert len(seeded) == 10
    assert {x["status"] for x in seeded} == {"Open"}
    assert {x["createdBy"] for x in seeded} == {"officer@hospital.org"}
    for x in seeded:
        delta = (date.fromisoformat(x["deadline"]) - today()).days
        assert 30 <= delta <= 89

    r = await client.get("/api/sourcing-requests", headers=officer)
    titles = {x["title"] for x in r.json()}
    assert "Old request" not in titles
    assert len(titles) == 10


@pytest.mark.asyncio
async def test_reset_data_is_hidden_in_prod_for_every_role(tmp_path) -> None:
    async with running_client(make_settings(tmp_path, env="prod")) as (_, client):
        officer = await register(client, "officer@hospital.org", "procurement")
        vendor = await register(client, "sales@medsupply.com", "vendor")

        for headers in (officer, vendor):
            r = await client.post("/api/reset-data", headers=headers)
            assert r.status_code == 404


@pytest.mark.asyncio
async def test_reset_data_still_requires_procurement_outside_prod(
    client: httpx.AsyncClient, vendor: dict[str, str]
) -> None:
    r = await client.post("/api/reset-data", headers=vendor)
    assert r.status_code == 403
