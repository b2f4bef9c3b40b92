"""
sourcing_portal.api.schemas

Response models shared by the request and proposal routers.

Responsibilities:
- Render ORM entities as camelCase JSON (`createdBy`, `statusHistory`, ...).
- Attach derived fields (`allowedTransitions`, `requestTitle`, `requestCategory`).
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from sourcing_portal.db.models import (
    Proposal,
    ProposalStatus,
    RequestCategory,
    RequestStatus,
    SourcingRequest,
    UserRole,
)
from sourcing_portal.workflow.transitions import allowed_transitions


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    message: str


class AuthResponse(ApiModel):
    token: str
    role: UserRole
    name: str


class StatusChangeOut(ApiModel):
    status: ProposalStatus
    updated_at: datetime
    updated_by: str


class ProposalOut(ApiModel):
    id: str
    request_id: str
    vendor_id: str
    vendor_name: str | None = None
    price: float
    delivery_date: date
    notes: str
    status: ProposalStatus
    submitted_at: datetime
    updated_at: datetime | None = None
    updated_by: str | None = None
    status_history: list[StatusChangeOut] = Field(default_factory=list)

    @computed_field(alias="allowedTransitions")  # type: ignore[prop-decorator]
    @property
    def allowed_transitions(self) -> list[ProposalStatus]:
        return sorted(allowed_transitions(self.status))


class ProposalWithRequestOut(ProposalOut):
    request_title: str
    request_category: RequestCategory

    @classmethod
    def from_proposal(
        cls, proposal: Proposal, *, request: SourcingRequest
    ) -> ProposalWithRequestOut:
        # `request` is passed in: proposals reached through `SourcingRequest.proposals` do not
        # have their back-reference loaded, and async sessions cannot lazy-load it here.
        base = ProposalOut.model_validate(proposal)
        return cls(
            **base.model_dump(exclude={"allowed_transitions"}),
            request_title=request.title,
            request_category=request.category,
        )


class SourcingRequestOut(ApiModel):
    id: str
    title: str
    category: RequestCategory
    description: str
    quantity: int
    deadline: date
    requirements: str
    status: RequestStatus
    created_by: str
    created_at: datetime
    proposals: list[ProposalOut] = Field(default_factory=list)


# --- Module Notes -----------------------------------------------------------
# FastAPI serializes `response_model`s by alias, so these models emit camelCase while the
# Python side keeps snake_case attribute names that match the ORM columns.
