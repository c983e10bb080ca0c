"""Status vocabularies for assignments, data items, and review outcomes.

Assignment lifecycle:

    Assigned → Submitted → Completed (approved)
                         ↘ Rejected
"""
from __future__ import annotations

from enum import StrEnum


class AssignmentStatus(StrEnum):
    ASSIGNED = "Assigned"
    SUBMITTED = "Submitted"
    COMPLETED = "Completed"
    REJECTED = "Rejected"


class DataItemStatus(StrEnum):
    PENDING = "Pending"
    DONE = "Done"


class Verdict(StrEnum):
    APPROVED = "Approved"
    REJECTED = "Rejected"


class AuditResult(StrEnum):
    AGREE = "Agree"
    DISAGREE = "Disagree"


# Allowed transitions: current status → {valid target statuses}
ASSIGNMENT_TRANSITIONS: dict[str, frozenset[str]] = {
    AssignmentStatus.ASSIGNED: frozenset({AssignmentStatus.SUBMITTED}),
    AssignmentStatus.SUBMITTED: frozenset({AssignmentStatus.COMPLETED, AssignmentStatus.REJECTED}),
}

VERDICT_TARGET: dict[Verdict, AssignmentStatus] = {
    Verdict.APPROVED: AssignmentStatus.COMPLETED,
    Verdict.REJECTED: AssignmentStatus.REJECTED,
}


def can_transition(current_status: str, to_status: str) -> bool:
    """Return whether *current_status* → *to_status* is allowed."""
    return to_status in ASSIGNMENT_TRANSITIONS.get(current_status, frozenset())
