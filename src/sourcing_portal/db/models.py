"""
sourcing_portal.db.models

Persistence schema for the sourcing portal.

Responsibilities:
- Define ORM models:
  - User: procurement officer or vendor account
  - SourcingRequest: a solicitation posted by a procurement officer
  - Proposal: a vendor's bid against a request
  - ProposalStatusChange: append-only status history of a proposal
- Own the status/category enums shared by the API and workflow layers.
"""

from __future__ import annotations

import enum
import threading
import time
from datetime import UTC, date, datetime

from sqlalchemy import Date, Enum, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sourcing_portal.db.base import Base


def utcnow() -> datetime:
    # Naive UTC; SQLite does not keep tzinfo anyway.
    return datetime.now(tz=UTC).replace(tzinfo=None)


_id_lock = threading.Lock()
_last_id = 0


def timestamp_id() -> str:
    """
    Millisecond timestamp id, bumped by one when two ids land in the same millisecond.
    """

    global _last_id
    with _id_lock:
        _last_id = max(time.time_ns() // 1_000_000, _last_id + 1)
        return str(_last_id)


def _values(enum_cls: type[enum.Enum]) -> list[str]:
    return [m.value for m in enum_cls]


class UserRole(enum.StrEnum):
    procurement = "procurement"
    vendor = "vendor"


class RequestCategory(enum.StrEnum):
    medical_equipment = "Medical Equipment"
    pharmaceuticals = "Pharmaceuticals"
    supplies = "Supplies"
    services = "Services"
    maintenance = "Maintenance"


class RequestStatus(enum.StrEnum):
    open = "Open"
    closed = "Closed"


class ProposalStatus(enum.StrEnum):
    pending = "Pending"
    shortlisted = "Shortlisted"
    rejected = "Rejected"
    ignored = "Ignored"


class User(Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(256), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=_values), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class SourcingRequest(Base):
    __tablename__ = "sourcing_requests"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=timestamp_id)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    category: Mapped[RequestCategory] = mapped_column(
        Enum(RequestCategory, values_callable=_values), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    deadline: Mapped[date] = mapped_column(Date, nullable=False)
    requirements: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[RequestStatus] = mapped_column(
        Enum(RequestStatus, values_callable=_values),
        nullable=False,
        default=RequestStatus.open,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(
        String(256), ForeignKey("users.email"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    proposals: Mapped[list[Proposal]] = relationship(
        back_populates="request",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by=lambda: (Proposal.submitted_at, Proposal.id),
    )


class Proposal(Base):
    __tablename__ = "proposals"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=timestamp_id)
    request_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("sourcing_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vendor_id: Mapped[str] = mapped_column(
        String(256), ForeignKey("users.email"), nullable=False, index=True
    )
    vendor_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    delivery_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ProposalStatus] = mapped_column(
        Enum(ProposalStatus, values_callable=_values),
        nullable=False,
        default=ProposalStatus.pending,
        index=True,
    )
    submitted_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(256), nullable=True)

    request: Mapped[SourcingRequest] = relationship(
        back_populates="proposals", lazy="selectin"
    )
    status_history: Mapped[list[ProposalStatusChange]] = relationship(
        back_populates="proposal",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by=lambda: (ProposalStatusChange.updated_at, ProposalStatusChange.seq),
    )


class ProposalStatusChange(Base):
    __tablename__ = "proposal_status_changes"

    # Insertion order breaks ties between entries written in the same instant.
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    proposal_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("proposals.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[ProposalStatus] = mapped_column(
        Enum(ProposalStatus, values_callable=_values), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_by: Mapped[str] = mapped_column(String(256), nullable=False)

    proposal: Mapped[Proposal] = relationship(back_populates="status_history")

    __table_args__ = (Index("ix_status_changes_proposal_updated", "proposal_id", "updated_at"),)


# --- Module Notes -----------------------------------------------------------
# Relationships load eagerly (selectin) because the API always renders a request together
# with its proposals and their history, and async sessions cannot lazy-load on access.
