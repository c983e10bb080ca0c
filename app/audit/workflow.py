"""Audit workflow — a manager's agree/disagree check on a past review.

Each ``ReviewLog`` may be audited once.  The outcome feeds the reviewer's
accuracy (``reviewer_quality_score``) on their ``UserProjectStat`` row for the
assignment's project.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.audit.review_log import mark_audited
from app.core.errors import InvalidStateError, NotFoundError
from app.db.repositories import AssignmentRepository, ReviewLogRepository
from app.db.session import transaction
from app.quality import scoring
from app.quality.ledger import StatsLedger
from app.review.statuses import AuditResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuditOutcome:
    review_log_id: int
    reviewer_id: str
    audit_result: AuditResult
    reviewer_quality_score: float


class AuditWorkflow:
    """Record audit outcomes and keep reviewer accuracy up to date."""

    def __init__(self, db_session: Session, ledger: StatsLedger | None = None) -> None:
        self.db = db_session
        self.ledger = ledger if ledger is not None else StatsLedger(db_session)
        self.logs = ReviewLogRepository(db_session)
        self.assignments = AssignmentRepository(db_session)

    def audit_review(
        self,
        manager_id: str,
        review_log_id: int,
        is_correct_decision: bool,
    ) -> AuditOutcome:
        log = self.logs.get(review_log_id)
        if log is None:
            raise NotFoundError("Review log not found")
        if log.is_audited:
            raise InvalidStateError("This review has already been audited")

        assignment = self.assignments.get(log.assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")

        result = AuditResult.AGREE if is_correct_decision else AuditResult.DISAGREE

        with self.ledger.locked(log.reviewer_id, assignment.project_id), transaction(self.db):
            # Two audits of the same log share this key; re-check under the lock.
            self.db.refresh(log, with_for_update=True)
            mark_audited(self.db, log, manager_id, result)

            stats = self.ledger.get_or_create(log.reviewer_id, assignment.project_id)
            stats.total_audited_reviews += 1
            if is_correct_decision:
                stats.total_correct_decisions += 1
            stats.reviewer_quality_score = scoring.reviewer_quality_score(
                stats.total_correct_decisions, stats.total_audited_reviews
            )
            self.db.flush()

            outcome = AuditOutcome(
                review_log_id=log.id,
                reviewer_id=log.reviewer_id,
                audit_result=result,
                reviewer_quality_score=stats.reviewer_quality_score,
            )

        logger.info(
            "Review audit applied: log=%s result=%s reviewer_quality=%.2f",
            review_log_id, result, outcome.reviewer_quality_score,
        )
        return outcome
