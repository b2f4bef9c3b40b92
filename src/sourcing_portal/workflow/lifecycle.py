"""
sourcing_portal.workflow.lifecycle

Open/Closed lifecycle of a sourcing request.

A request stays open through its deadline day and closes once the (UTC) calendar date
moves past it.
"""

from __future__ import annotations

from datetime import UTC, date, datetime

from sourcing_portal.db.models import RequestStatus


def utc_today() -> date:
    return datetime.now(tz=UTC).date()


def is_expired(deadline: date, today: date | None = None) -> bool:
    return deadline < (today or utc_today())


def effective_status(
    status: RequestStatus, deadline: date, today: date | None = None
) -> RequestStatus:
    if is_expired(deadline, today):
        return RequestStatus.closed
    return status


def needs_auto_close(status: RequestStatus, deadline: date, today: date | None = None) -> bool:
    return status == RequestStatus.open and is_expired(deadline, today)


def delivery_within_deadline(delivery_date: date, deadline: date) -> bool:
    return delivery_date <= deadline
