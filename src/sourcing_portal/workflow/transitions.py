"""
sourcing_portal.workflow.transitions

Proposal status state machine.

Responsibilities:
- Declare which status moves a reviewing officer can make.
- Validate a requested status change in lenient or strict mode.
"""

from __future__ import annotations

from collections.abc import Mapping

from sourcing_portal.db.models import ProposalStatus

# Pending is the review queue; every other status can be undone back to Pending.
TRANSITIONS: Mapping[ProposalStatus, frozenset[ProposalStatus]] = {
    ProposalStatus.pending: frozenset(
        {ProposalStatus.shortlisted, ProposalStatus.rejected, ProposalStatus.ignored}
    ),
    ProposalStatus.shortlisted: frozenset({ProposalStatus.pending}),
    ProposalStatus.rejected: frozenset({ProposalStatus.pending}),
    ProposalStatus.ignored: frozenset({ProposalStatus.pending}),
}


class InvalidStatusError(ValueError):
    def __init__(self, raw: object) -> None:
        allowed = ", ".join(s.value for s in ProposalStatus)
        super().__init__(f"Invalid status '{raw}'. Expected one of: {allowed}")
        self.raw = raw


class TransitionNotAllowedError(ValueError):
    def __init__(self, current: ProposalStatus, target: ProposalStatus) -> None:
        super().__init__(f"Cannot change proposal status from {current} to {target}")
        self.current = current
        self.target = target


def parse_status(raw: object) -> ProposalStatus:
    if isinstance(raw, ProposalStatus):
        return raw
    try:
        return ProposalStatus(str(raw))
    except ValueError as e:
        raise InvalidStatusError(raw) from e


def allowed_transitions(current: ProposalStatus) -> frozenset[ProposalStatus]:
    return TRANSITIONS.get(current, frozenset())


def check_transition(
    current: ProposalStatus, target: object, *, strict: bool = False
) -> ProposalStatus:
    """
    Validate moving a proposal from `current` to `target` and return the parsed target.

    Lenient mode accepts any known status, which lets an officer overwrite a Rejected or
    Ignored proposal directly. Strict mode only accepts the moves in `TRANSITIONS`.
    """

    parsed = parse_status(target)
    if strict and parsed not in allowed_transitions(current):
        raise TransitionNotAllowedError(current, parsed)
    return parsed
