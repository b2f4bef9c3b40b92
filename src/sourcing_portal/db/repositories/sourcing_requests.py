"""
sourcing_portal.db.repositories.sourcing_requests

Repository for `SourcingRequest` entities.

Responsibilities:
- Create, fetch, filter and delete sourcing requests.
- Apply field updates passed down from the service layer.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from sourcing_portal.db.models import (
    RequestCategory,
    RequestStatus,
    SourcingRequest,
)

# Columns a creator may edit after posting.
EDITABLE_FIELDS = ("title", "category", "description", "quantity", "deadline", "requirements")


class SourcingRequestRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        title: str,
        category: RequestCategory,
        description: str,
        quantity: int,
        deadline: date,
        requirements: str,
        status: RequestStatus,
        created_by: str,
    ) -> SourcingRequest:
        req = SourcingRequest(
            title=title,
            category=category,
            description=description,
            quantity=quantity,
            deadline=deadline,
            requirements=requirements,
            status=status,
            created_by=created_by,
            proposals=[],
        )
        self._session.add(req)
        await self._session.flush()
        return req

    async def get(self, request_id: str, *, for_update: bool = False) -> SourcingRequest | None:
        return await self._session.get(SourcingRequest, request_id, with_for_update=for_update)

    async def list_all(
        self,
        *,
        status: RequestStatus | None = None,
        category: RequestCategory | None = None,
        created_by: str | None = None,
    ) -> list[SourcingRequest]:
        stmt = select(SourcingRequest).order_by(
            desc(SourcingRequest.created_at), desc(SourcingRequest.id)
        )
        if status is not None:
            stmt = stmt.where(SourcingRequest.status == status)
        if category is not None:
            stmt = stmt.where(SourcingRequest.category == category)
        if created_by is not None:
            stmt = stmt.where(SourcingRequest.created_by == created_by)
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_expired_open(self, today: date) -> list[SourcingRequest]:
        stmt = select(SourcingRequest).where(
            SourcingRequest.status == RequestStatus.open,
            SourcingRequest.deadline < today,
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def apply_updates(self, req: SourcingRequest, updates: dict[str, Any]) -> None:
        for field in EDITABLE_FIELDS:
            if field in updates and updates[field] is not None:
                setattr(req, field, updates[field])
        await self._session.flush()

    async def set_status(self, req: SourcingRequest, status: RequestStatus) -> None:
        req.status = status
        await self._session.flush()

    async def delete(self, req: SourcingRequest) -> None:
        # ORM cascade removes loaded proposals and their history.
        await self._session.delete(req)
        await self._session.flush()

    async def delete_all(self) -> None:
        for req in await self.list_all():
            await self._session.delete(req)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# `delete_all` goes through the ORM instead of a bulk DELETE so cascades also hold on
# databases where the foreign keys were created without ON DELETE CASCADE.
