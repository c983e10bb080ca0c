"""Read-side projection of assignments awaiting review.

Missing related data never drops a task from the listing; it is replaced by
the documented defaults:

- storage URL / project name → ``""``
- deadline → ``DEADLINE_UNSET``
- label catalog → ``[]``

Annotations are decoded leniently by ``decode_annotation_payload``; entries
that do not decode to a value are left out.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from app.db.models import Annotation, Assignment
from app.db.repositories import AssignmentRepository
from app.review.statuses import AssignmentStatus

logger = logging.getLogger(__name__)

DEADLINE_UNSET = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class LabelView:
    id: int
    name: str
    color: str | None
    guideline: str | None


@dataclass(frozen=True, slots=True)
class TaskView:
    assignment_id: int
    data_item_id: int | None
    storage_url: str
    project_name: str
    status: str
    deadline: datetime
    labels: list[LabelView] = field(default_factory=list)
    existing_annotations: list[Any] = field(default_factory=list)


def decode_annotation_payload(primary: str | None, fallback: str | None) -> Any | None:
    """Parse the stored annotation payload as JSON.

    ``primary`` is used when non-empty, otherwise ``fallback``.  Returns
    ``None`` when both are empty, when the chosen text is not valid JSON or
    nests too deeply to decode, or when it decodes to JSON ``null``.
    """
    raw = primary if primary else fallback
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, RecursionError):
        return None


class TaskQueryService:
    """Build review-ready views without mutating anything."""

    def __init__(self, db_session: Session) -> None:
        self.assignments = AssignmentRepository(db_session)

    def list_pending_review(self, project_id: int) -> list[TaskView]:
        """Return a ``TaskView`` per ``Submitted`` assignment of *project_id*, by id."""
        pending = self.assignments.list_for_review(project_id, AssignmentStatus.SUBMITTED)
        return [self._to_view(a) for a in pending]

    def _to_view(self, assignment: Assignment) -> TaskView:
        data_item = assignment.data_item
        project = assignment.project

        labels: list[LabelView] = []
        if project is not None:
            labels = [
                LabelView(id=lc.id, name=lc.name, color=lc.color, guideline=lc.guideline)
                for lc in project.label_classes
            ]

        return TaskView(
            assignment_id=assignment.id,
            data_item_id=assignment.data_item_id,
            storage_url=(data_item.storage_url if data_item is not None else None) or "",
            project_name=(project.name if project is not None else None) or "",
            status=assignment.status,
            deadline=(project.deadline if project is not None else None) or DEADLINE_UNSET,
            labels=labels,
            existing_annotations=self._decode_annotations(assignment.annotations),
        )

    @staticmethod
    def _decode_annotations(annotations: list[Annotation]) -> list[Any]:
        decoded = []
        for annotation in annotations:
            payload = decode_annotation_payload(annotation.data_json, annotation.value)
            if payload is None:
                if annotation.data_json or annotation.value:
                    logger.warning("Annotation payload dropped: annotation=%s", annotation.id)
                continue
            decoded.append(payload)
        return decoded
