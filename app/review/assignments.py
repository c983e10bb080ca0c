"""Assignment lifecycle before review: routing work to annotators and hand-in.

``assign`` is the only writer of ``UserProjectStat.total_assigned``, which
the efficiency score is measured against.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.errors import InvalidStateError, NotFoundError
from app.db.models import Assignment
from app.db.repositories import AssignmentRepository, DataItemRepository, ProjectRepository
from app.db.session import transaction
from app.quality.ledger import StatsLedger
from app.review.statuses import AssignmentStatus, can_transition

logger = logging.getLogger(__name__)


class AssignmentService:
    """Create assignments and move them from ``Assigned`` to ``Submitted``."""

    def __init__(self, db_session: Session, ledger: StatsLedger | None = None) -> None:
        self.db = db_session
        self.ledger = ledger if ledger is not None else StatsLedger(db_session)
        self.assignments = AssignmentRepository(db_session)
        self.projects = ProjectRepository(db_session)
        self.data_items = DataItemRepository(db_session)

    def assign(
        self,
        project_id: int,
        annotator_id: str,
        data_item_id: int | None = None,
    ) -> Assignment:
        """Route a new assignment to *annotator_id* and count it in their stats."""
        if self.projects.get(project_id) is None:
            raise NotFoundError("Project info not found")
        if data_item_id is not None:
            data_item = self.data_items.get(data_item_id)
            if data_item is None or data_item.project_id != project_id:
                raise NotFoundError("Data item not found")

        with self.ledger.locked(annotator_id, project_id), transaction(self.db):
            assignment = self.assignments.create(
                project_id=project_id,
                annotator_id=annotator_id,
                data_item_id=data_item_id,
                status=AssignmentStatus.ASSIGNED,
                assigned_at=datetime.now(timezone.utc),
            )
            stats = self.ledger.get_or_create(annotator_id, project_id)
            stats.total_assigned += 1
            self.db.flush()

        logger.info("Assignment created: assignment=%s project=%s", assignment.id, project_id)
        return assignment

    def submit(self, assignment_id: int, annotator_id: str) -> Assignment:
        """Hand in *assignment_id* for review."""
        with transaction(self.db):
            assignment = self.assignments.get(assignment_id)
            if assignment is None:
                raise NotFoundError("Assignment not found")
            if assignment.annotator_id != annotator_id:
                raise InvalidStateError("Assignment belongs to another annotator")
            if not can_transition(assignment.status, AssignmentStatus.SUBMITTED):
                raise InvalidStateError(
                    f"Cannot submit assignment in status {assignment.status!r}"
                )
            assignment.status = AssignmentStatus.SUBMITTED
            assignment.submitted_at = datetime.now(timezone.utc)
            self.db.flush()

        logger.info("Assignment submitted: assignment=%s", assignment_id)
        return assignment
