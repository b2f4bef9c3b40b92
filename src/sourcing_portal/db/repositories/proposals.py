"""
sourcing_portal.db.repositories.proposals

Repository for `Proposal` entities and their status history.

Responsibilities:
- Create and fetch proposals.
- Append status history entries (never update or delete them).
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sourcing_portal.db.models import (
    Proposal,
    ProposalStatus,
    ProposalStatusChange,
    SourcingRequest,
)


class ProposalRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        request: SourcingRequest,
        vendor_id: str,
        vendor_name: str | None,
        price: float,
        delivery_date: date,
        notes: str,
    ) -> Proposal:
        proposal = Proposal(
            request_id=request.id,
            vendor_id=vendor_id,
            vendor_name=vendor_name,
            price=price,
            delivery_date=delivery_date,
            notes=notes,
            status=ProposalStatus.pending,
            status_history=[],
        )
        request.proposals.append(proposal)
        await self._session.flush()
        return proposal

    async def get(self, proposal_id: str, *, for_update: bool = False) -> Proposal | None:
        return await self._session.get(Proposal, proposal_id, with_for_update=for_update)

    async def list_for_vendor(self, vendor_id: str) -> list[Proposal]:
        stmt = (
            select(Proposal)
            .options(selectinload(Proposal.request))
            .where(Proposal.vendor_id == vendor_id)
            .order_by(Proposal.submitted_at, Proposal.id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def record_status(
        self,
        proposal: Proposal,
        *,
        status: ProposalStatus,
        updated_by: str,
        at: datetime,
    ) -> ProposalStatusChange:
        proposal.status = status
        proposal.updated_at = at
        proposal.updated_by = updated_by
        change = ProposalStatusChange(status=status, updated_at=at, updated_by=updated_by)
        proposal.status_history.append(change)
        await self._session.flush()
        return change
