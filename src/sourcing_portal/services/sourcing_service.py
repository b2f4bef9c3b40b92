"""
sourcing_portal.services.sourcing_service

Sourcing request and proposal lifecycle service (transaction + authorization owner).

Responsibilities:
- CRUD for sourcing requests, restricted to the request creator for mutations.
- Auto-close requests whose deadline has passed.
- Accept vendor proposals against open requests only.
- Apply proposal status changes through the workflow state machine and record history.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from sourcing_portal.auth.models import Principal
from sourcing_portal.db.models import (
    Proposal,
    RequestCategory,
    RequestStatus,
    SourcingRequest,
    utcnow,
)
from sourcing_portal.db.repositories.proposals import ProposalRepo
from sourcing_portal.db.repositories.sourcing_requests import SourcingRequestRepo
from sourcing_portal.db.repositories.users import UserRepo
from sourcing_portal.observability.logging import get_logger
from sourcing_portal.services.demo_data import generate_demo_requests
from sourcing_portal.services.errors import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    TransitionError,
    ValidationFailedError,
)
from sourcing_portal.settings import Settings
from sourcing_portal.workflow.lifecycle import (
    delivery_within_deadline,
    is_expired,
    needs_auto_close,
    utc_today,
)
from sourcing_portal.workflow.transitions import (
    InvalidStatusError,
    TransitionNotAllowedError,
    check_transition,
)


@dataclass(frozen=True, slots=True)
class RequestDraft:
    title: str
    category: RequestCategory
    description: str
    quantity: int
    deadline: date
    requirements: str


def visible_proposals(req: SourcingRequest, principal: Principal) -> list[Proposal]:
    """
    The creator sees every proposal on a request; anyone else only sees their own bids.
    """

    if req.created_by == principal.email:
        return list(req.proposals)
    return [p for p in req.proposals if p.vendor_id == principal.email]


class SourcingService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._log = get_logger(__name__)

        self._requests = SourcingRequestRepo(session)
        self._proposals = ProposalRepo(session)
        self._users = UserRepo(session)

    # -- sourcing requests ------------------------------------------------------

    async def list_requests(
        self,
        *,
        principal: Principal,
        status: RequestStatus | None = None,
        category: RequestCategory | None = None,
        mine: bool = False,
    ) -> list[SourcingRequest]:
        await self.close_expired_requests()
        return await self._requests.list_all(
            status=status,
            category=category,
            created_by=principal.email if mine else None,
        )

    async def get_request(self, request_id: str) -> SourcingRequest:
        req = await self._get_request_or_404(request_id)
        if self._auto_close(req):
            await self._session.commit()
        return req

    async def create_request(self, *, principal: Principal, draft: RequestDraft) -> SourcingRequest:
        # A deadline already in the past produces a request that never accepts bids.
        status = RequestStatus.closed if is_expired(draft.deadline) else RequestStatus.open
        req = await self._requests.create(
            title=draft.title,
            category=draft.category,
            description=draft.description,
            quantity=draft.quantity,
            deadline=draft.deadline,
            requirements=draft.requirements,
            status=status,
            created_by=principal.email,
        )
        await self._session.commit()
        self._log.info(
            "sourcing_request_created",
            request_id=req.id,
            created_by=principal.email,
            status=req.status.value,
        )
        return req

    async def update_request(
        self,
        *,
        principal: Principal,
        request_id: str,
        updates: dict[str, Any],
    ) -> SourcingRequest:
        req = await self._get_request_or_404(request_id, for_update=True)
        if req.created_by != principal.email:
            raise PermissionDeniedError("Not authorized to edit this request")

        await self._requests.apply_updates(req, updates)
        self._auto_close(req)
        await self._session.commit()
        self._log.info(
            "sourcing_request_updated", request_id=req.id, fields=sorted(updates.keys())
        )
        return req

    async def set_request_status(
        self,
        *,
        principal: Principal,
        request_id: str,
        status: RequestStatus,
    ) -> SourcingRequest:
        req = await self._get_request_or_404(request_id, for_update=True)
        if req.created_by != principal.email:
            raise PermissionDeniedError("Not authorized to edit this request")
        if status == RequestStatus.open and is_expired(req.deadline):
            raise ValidationFailedError("Cannot reopen a request whose deadline has passed")

        previous = req.status
        await self._requests.set_status(req, status)
        await self._session.commit()
        self._log.info(
            "sourcing_request_status_changed",
            request_id=req.id,
            from_status=previous.value,
            to_status=status.value,
        )
        return req

    async def delete_request(self, *, principal: Principal, request_id: str) -> None:
        req = await self._get_request_or_404(request_id, for_update=True)
        if req.created_by != principal.email:
            raise PermissionDeniedError("Not authorized to delete this request")

        removed_proposals = len(req.proposals)
        await self._requests.delete(req)
        await self._session.commit()
        self._log.info(
            "sourcing_request_deleted",
            request_id=request_id,
            removed_proposals=removed_proposals,
        )

    async def list_request_proposals(
        self, *, principal: Principal, request_id: str
    ) -> tuple[SourcingRequest, list[Proposal]]:
        req = await self.get_request(request_id)
        if req.created_by != principal.email:
            raise PermissionDeniedError("Not authorized to view proposals")
        return req, list(req.proposals)

    async def close_expired_requests(self) -> int:
        expired = await self._requests.list_expired_open(utc_today())
        for req in expired:
            self._auto_close(req)
        if expired:
            await self._session.commit()
        return len(expired)

    # -- proposals --------------------------------------------------------------

    async def submit_proposal(
        self,
        *,
        principal: Principal,
        request_id: str | None,
        price: float | None,
        delivery_date: date | None,
        notes: str | None,
    ) -> Proposal:
        if not request_id or not price or delivery_date is None or not notes:
            raise ValidationFailedError("All fields are required")

        vendor = await self._users.get(principal.email)
        if vendor is None:
            raise AuthenticationError("Unauthorized")

        req = await self._get_request_or_404(request_id, for_update=True)
        if self._auto_close(req):
            # Persist the close even though the submission is refused.
            await self._session.commit()
        if req.status != RequestStatus.open:
            raise ValidationFailedError("This request is no longer accepting proposals")
        if not delivery_within_deadline(delivery_date, req.deadline):
            raise ValidationFailedError(
                f"Delivery date must be on or before the request deadline ({req.deadline})"
            )

        proposal = await self._proposals.create(
            request=req,
            vendor_id=vendor.email,
            vendor_name=vendor.name,
            price=price,
            delivery_date=delivery_date,
            notes=notes,
        )
        await self._session.commit()
        self._log.info(
            "proposal_submitted",
            proposal_id=proposal.id,
            request_id=req.id,
            vendor_id=vendor.email,
        )
        return proposal

    async def list_vendor_proposals(self, *, principal: Principal) -> list[Proposal]:
        return await self._proposals.list_for_vendor(principal.email)

    async def change_proposal_status(
        self,
        *,
        principal: Principal,
        proposal_id: str,
        status: object,
    ) -> Proposal:
        if await self._users.get(principal.email) is None:
            raise AuthenticationError("Unauthorized")

        proposal = await self._proposals.get(proposal_id, for_update=True)
        if proposal is None:
            raise NotFoundError("Proposal not found")
        if proposal.request.created_by != principal.email:
            raise PermissionDeniedError("Not authorized to update proposal status")

        try:
            target = check_transition(
                proposal.status, status, strict=self._settings.strict_status_transitions
            )
        except InvalidStatusError as e:
            raise ValidationFailedError(str(e)) from e
        except TransitionNotAllowedError as e:
            raise TransitionError(str(e)) from e

        # History stays ordered by updated_at even if the wall clock steps backwards.
        at = utcnow()
        if proposal.status_history and at < proposal.status_history[-1].updated_at:
            at = proposal.status_history[-1].updated_at

        previous = proposal.status
        await self._proposals.record_status(
            proposal, status=target, updated_by=principal.email, at=at
        )
        await self._session.commit()
        self._log.info(
            "proposal_status_changed",
            proposal_id=proposal.id,
            request_id=proposal.request_id,
            from_status=previous.value,
            to_status=target.value,
            updated_by=principal.email,
        )
        return proposal

    # -- dev tooling --------------------------------------------------------------

    async def reset_demo_data(self, *, principal: Principal) -> list[SourcingRequest]:
        await self._requests.delete_all()
        created = [
            await self._requests.create(
                title=demo.title,
                category=demo.category,
                description=demo.description,
                quantity=demo.quantity,
                deadline=demo.deadline,
                requirements=demo.requirements,
                status=RequestStatus.open,
                created_by=principal.email,
            )
            for demo in generate_demo_requests(today=utc_today())
        ]
        await self._session.commit()
        self._log.info("demo_data_reset", created=len(created), created_by=principal.email)
        return created

    # -- helpers --------------------------------------------------------------------

    async def _get_request_or_404(
        self, request_id: str, *, for_update: bool = False
    ) -> SourcingRequest:
        req = await self._requests.get(request_id, for_update=for_update)
        if req is None:
            raise NotFoundError("Sourcing request not found")
        return req

    def _auto_close(self, req: SourcingRequest) -> bool:
        # Caller owns the commit.
        if not needs_auto_close(req.status, req.deadline):
            return False
        req.status = RequestStatus.closed
        self._log.info(
            "request_auto_closed", request_id=req.id, deadline=req.deadline.isoformat()
        )
        return True


# --- Module Notes -----------------------------------------------------------
# This service is the transaction boundary: routers call exactly one method per request and
# never commit on their own.
