"""
sourcing_portal.api.routers.proposals

Proposal endpoints.

Responsibilities:
- Vendor proposal submission and "my proposals" listing.
- Proposal status changes by the owning procurement officer.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from pydantic import Field
from starlette.status import HTTP_201_CREATED

from sourcing_portal.api.deps import sourcing_service
from sourcing_portal.api.schemas import ApiModel, ProposalOut, ProposalWithRequestOut
from sourcing_portal.auth.deps import get_principal, require_role
from sourcing_portal.auth.models import Principal
from sourcing_portal.db.models import UserRole
from sourcing_portal.services.sourcing_service import SourcingService

router = APIRouter(prefix="/proposals", tags=["proposals"])


class ProposalCreate(ApiModel):
    # Presence is checked by the service so a partial form gets one readable message.
    request_id: str | None = None
    price: float | None = Field(default=None, gt=0)
    delivery_date: date | None = None
    notes: str | None = None


class ProposalStatusUpdate(ApiModel):
    # Parsed by the workflow layer so unknown values get the list of valid statuses.
    status: str


@router.post("", response_model=ProposalOut, status_code=HTTP_201_CREATED)
async def submit_proposal(
    body: ProposalCreate,
    principal: Principal = Depends(require_role(UserRole.vendor)),
    svc: SourcingService = Depends(sourcing_service),
) -> ProposalOut:
    proposal = await svc.submit_proposal(
        principal=principal,
        request_id=body.request_id,
        price=body.price,
        delivery_date=body.delivery_date,
        notes=body.notes,
    )
    return ProposalOut.model_validate(proposal)


@router.get("/vendor", response_model=list[ProposalWithRequestOut])
async def list_my_proposals(
    principal: Principal = Depends(require_role(UserRole.vendor)),
    svc: SourcingService = Depends(sourcing_service),
) -> list[ProposalWithRequestOut]:
    proposals = await svc.list_vendor_proposals(principal=principal)
    return [ProposalWithRequestOut.from_proposal(p, request=p.request) for p in proposals]


@router.put("/{proposal_id}/status", response_model=ProposalOut)
async def update_proposal_status(
    proposal_id: str,
    body: ProposalStatusUpdate,
    principal: Principal = Depends(get_principal),
    svc: SourcingService = Depends(sourcing_service),
) -> ProposalOut:
    proposal = await svc.change_proposal_status(
        principal=principal, proposal_id=proposal_id, status=body.status
    )
    return ProposalOut.model_validate(proposal)
