"""Review workflow — turns a reviewer's verdict into assignment, stats and log updates.

One call to ``submit_review`` is one transaction over:

- the assignment (``Submitted → Completed | Rejected``) and its data item,
- the annotator's ``UserProjectStat`` row,
- a new ``ReviewLog`` entry.

Either all of them are committed or none is.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.audit.review_log import record_review
from app.core.errors import InvalidInputError, InvalidStateError, NotFoundError
from app.core.settings import get_settings
from app.db.models import Assignment, Project, UserProjectStat
from app.db.repositories import AssignmentRepository, DataItemRepository, ProjectRepository
from app.db.session import transaction
from app.quality import error_categories, scoring
from app.quality.ledger import StatsLedger
from app.review.statuses import (
    VERDICT_TARGET,
    AssignmentStatus,
    DataItemStatus,
    Verdict,
    can_transition,
)

logger = logging.getLogger(__name__)


class ReviewWorkflow:
    """Apply review verdicts to submitted assignments."""

    def __init__(
        self,
        db_session: Session,
        ledger: StatsLedger | None = None,
        enforce_categories: bool | None = None,
    ) -> None:
        self.db = db_session
        self.ledger = ledger if ledger is not None else StatsLedger(db_session)
        self.assignments = AssignmentRepository(db_session)
        self.projects = ProjectRepository(db_session)
        self.data_items = DataItemRepository(db_session)
        if enforce_categories is None:
            enforce_categories = get_settings().enforce_error_categories
        self.enforce_categories = enforce_categories

    def submit_review(
        self,
        reviewer_id: str,
        assignment_id: int,
        is_approved: bool,
        comment: str | None = None,
        error_category: str | None = None,
    ) -> Verdict:
        """Approve or reject *assignment_id* and return the recorded verdict.

        Raises ``NotFoundError`` when the assignment or its project is missing,
        ``InvalidStateError`` when the assignment is not ``Submitted`` and
        ``InvalidInputError`` for an unknown category while categories are
        enforced.
        """
        verdict = Verdict.APPROVED if is_approved else Verdict.REJECTED
        if not is_approved and self.enforce_categories and error_category:
            if error_categories.resolve(error_category) is None:
                raise InvalidInputError(f"Unknown error category {error_category!r}")

        assignment = self.assignments.get(assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")

        with self.ledger.locked(assignment.annotator_id, assignment.project_id), transaction(self.db):
            # Re-read under the key lock: a concurrent review of the same
            # assignment holds the same key.
            self.db.refresh(assignment, with_for_update=True)
            if assignment.status != AssignmentStatus.SUBMITTED:
                raise InvalidStateError("This task is not ready for review.")

            project = self.projects.get(assignment.project_id)
            if project is None:
                raise NotFoundError("Project info not found")

            stats = self.ledger.get_or_create(assignment.annotator_id, assignment.project_id)

            if is_approved:
                score = scoring.task_score(approved=True)
                penalty = 0
                self._approve(assignment, project, stats)
                category = None
            else:
                weight = error_categories.severity_weight(error_category)
                penalty = scoring.penalty_for_weight(weight)
                score = scoring.task_score(approved=False, weight=weight)
                self._reject(assignment, stats, weight)
                category = error_category

            self._fold_score(stats, score)
            now = datetime.now(timezone.utc)
            stats.date = now
            assignment.reviewed_at = now

            record_review(
                self.db,
                assignment_id=assignment.id,
                reviewer_id=reviewer_id,
                verdict=verdict,
                comment=comment,
                error_category=category,
                score_penalty=penalty,
            )
            self.db.flush()
            average = stats.average_quality_score

        logger.info(
            "Assignment reviewed: assignment=%s verdict=%s score=%.2f average=%.2f",
            assignment_id, verdict, score, average,
        )
        return verdict

    # -- branches -----------------------------------------------------------

    def _approve(self, assignment: Assignment, project: Project, stats: UserProjectStat) -> None:
        self._move(assignment, VERDICT_TARGET[Verdict.APPROVED])
        stats.total_approved += 1
        stats.estimated_earnings = stats.total_approved * project.price_per_label

        if assignment.data_item_id:
            data_item = self.data_items.get(assignment.data_item_id)
            if data_item is not None:
                data_item.status = DataItemStatus.DONE

    def _reject(self, assignment: Assignment, stats: UserProjectStat, weight: int) -> None:
        self._move(assignment, VERDICT_TARGET[Verdict.REJECTED])
        stats.total_rejected += 1
        if weight >= error_categories.WEIGHT_CRITICAL:
            stats.total_critical_errors += 1

    # -- helpers ------------------------------------------------------------

    @staticmethod
    def _move(assignment: Assignment, to_status: AssignmentStatus) -> None:
        if not can_transition(assignment.status, to_status):
            raise InvalidStateError(
                f"Invalid transition {assignment.status!r} → {to_status!r}"
            )
        assignment.status = to_status

    @staticmethod
    def _fold_score(stats: UserProjectStat, score: float) -> None:
        stats.average_quality_score = scoring.running_average(
            stats.average_quality_score, stats.total_reviewed_tasks, score
        )
        stats.total_reviewed_tasks += 1
        if stats.total_assigned > 0:
            stats.efficiency_score = scoring.efficiency_score(stats.total_approved, stats.total_assigned)
