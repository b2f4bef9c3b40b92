"""
sourcing_portal.api.routers.dev

Local development helpers. The app factory does not mount this router when `env=prod`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sourcing_portal.api.deps import sourcing_service
from sourcing_portal.api.schemas import ApiModel, SourcingRequestOut
from sourcing_portal.auth.deps import require_role
from sourcing_portal.auth.models import Principal
from sourcing_portal.db.models import UserRole
from sourcing_portal.services.sourcing_service import SourcingService

router = APIRouter(tags=["dev"])


class ResetDataResponse(ApiModel):
    message: str
    requests: list[SourcingRequestOut]


@router.post("/reset-data", response_model=ResetDataResponse)
async def reset_data(
    principal: Principal = Depends(require_role(UserRole.procurement)),
    svc: SourcingService = Depends(sourcing_service),
) -> ResetDataResponse:
    created = await svc.reset_demo_data(principal=principal)
    return ResetDataResponse(
        message="Data reset successful",
        requests=[SourcingRequestOut.model_validate(r) for r in created],
    )
