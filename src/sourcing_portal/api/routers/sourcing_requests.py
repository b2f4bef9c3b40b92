"""
sourcing_portal.api.routers.sourcing_requests

Sourcing request endpoints.

Responsibilities:
- CRUD for sourcing requests (create restricted to procurement officers).
- Manual Open/Closed status changes by the creator.
- Creator-only listing of a request's proposals.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Response
from pydantic import Field
from starlette.status import HTTP_201_CREATED

from sourcing_portal.api.deps import sourcing_service
from sourcing_portal.api.schemas import (
    ApiModel,
    MessageResponse,
    ProposalOut,
    ProposalWithRequestOut,
    SourcingRequestOut,
)
from sourcing_portal.auth.deps import get_principal, require_role
from sourcing_portal.auth.models import Principal
from sourcing_portal.db.models import RequestCategory, RequestStatus, SourcingRequest, UserRole
from sourcing_portal.services.sourcing_service import (
    RequestDraft,
    SourcingService,
    visible_proposals,
)

router = APIRouter(prefix="/sourcing-requests", tags=["sourcing-requests"])


class SourcingRequestCreate(ApiModel):
    title: str = Field(min_length=1, max_length=256)
    category: RequestCategory
    description: str = ""
    quantity: int = Field(ge=1)
    deadline: date
    requirements: str = ""


class SourcingRequestUpdate(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=256)
    category: RequestCategory | None = None
    description: str | None = None
    quantity: int | None = Field(default=None, ge=1)
    deadline: date | None = None
    requirements: str | None = None


class StatusUpdate(ApiModel):
    status: RequestStatus


def _render(req: SourcingRequest, principal: Principal) -> SourcingRequestOut:
    proposals = [ProposalOut.model_validate(p) for p in visible_proposals(req, principal)]
    return SourcingRequestOut.model_validate(req).model_copy(update={"proposals": proposals})


@router.get("", response_model=list[SourcingRequestOut])
async def list_sourcing_requests(
    response: Response,
    status: RequestStatus | None = None,
    category: RequestCategory | None = None,
    mine: bool = False,
    principal: Principal = Depends(get_principal),
    svc: SourcingService = Depends(sourcing_service),
) -> list[SourcingRequestOut]:
    # Dashboards poll this list; never serve it from an intermediate cache.
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, proxy-revalidate"
    requests = await svc.list_requests(
        principal=principal, status=status, category=category, mine=mine
    )
    return [_render(r, principal) for r in requests]


@router.post("", response_model=SourcingRequestOut, status_code=HTTP_201_CREATED)
async def create_sourcing_request(
    body: SourcingRequestCreate,
    principal: Principal = Depends(require_role(UserRole.procurement)),
    svc: SourcingService = Depends(sourcing_service),
) -> SourcingRequestOut:
    draft = RequestDraft(
        title=body.title,
        category=body.category,
        description=body.description,
        quantity=body.quantity,
        deadline=body.deadline,
        requirements=body.requirements,
    )
    req = await svc.create_request(principal=principal, draft=draft)
    return _render(req, principal)


@router.get("/{request_id}", response_model=SourcingRequestOut)
async def get_sourcing_request(
    request_id: str,
    principal: Principal = Depends(get_principal),
    svc: SourcingService = Depends(sourcing_service),
) -> SourcingRequestOut:
    return _render(await svc.get_request(request_id), principal)


@router.put("/{request_id}", response_model=SourcingRequestOut)
async def update_sourcing_request(
    request_id: str,
    body: SourcingRequestUpdate,
    principal: Principal = Depends(get_principal),
    svc: SourcingService = Depends(sourcing_service),
) -> SourcingRequestOut:
    req = await svc.update_request(
        principal=principal,
        request_id=request_id,
        updates=body.model_dump(exclude_unset=True),
    )
    return _render(req, principal)


@router.put("/{request_id}/status", response_model=SourcingRequestOut)
async def set_sourcing_request_status(
    request_id: str,
    body: StatusUpdate,
    principal: Principal = Depends(get_principal),
    svc: SourcingService = Depends(sourcing_service),
) -> SourcingRequestOut:
    req = await svc.set_request_status(
        principal=principal, request_id=request_id, status=body.status
    )
    return _render(req, principal)


@router.delete("/{request_id}", response_model=MessageResponse)
async def delete_sourcing_request(
    request_id: str,
    principal: Principal = Depends(get_principal),
    svc: SourcingService = Depends(sourcing_service),
) -> MessageResponse:
    await svc.delete_request(principal=principal, request_id=request_id)
    return MessageResponse(message="Request deleted successfully")


@router.get("/{request_id}/proposals", response_model=list[ProposalWithRequestOut])
async def list_request_proposals(
    request_id: str,
    principal: Principal = Depends(get_principal),
    svc: SourcingService = Depends(sourcing_service),
) -> list[ProposalWithRequestOut]:
    req, proposals = await svc.list_request_proposals(
        principal=principal, request_id=request_id
    )
    return [ProposalWithRequestOut.from_proposal(p, request=req) for p in proposals]
