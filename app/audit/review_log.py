"""Append-only review log.

``record_review()`` persists one ``ReviewLog`` per review decision.  Rows are
never updated afterwards except by ``mark_audited()``, which sets the audit
columns exactly once.

Safety: review comments are never logged, only ids and outcomes.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import InvalidStateError
from app.db.models import Assignment, ReviewLog
from app.review.statuses import AuditResult, Verdict

logger = logging.getLogger(__name__)


def record_review(
    db_session: Session,
    assignment_id: int,
    reviewer_id: str,
    verdict: Verdict,
    comment: str | None = None,
    error_category: str | None = None,
    score_penalty: int = 0,
) -> ReviewLog:
    """Create and persist a ``ReviewLog``.

    Raises ``ValueError`` for invalid inputs.  Flushes but does **not**
    commit — the caller controls the transaction boundary.
    """
    if verdict not in set(Verdict):
        raise ValueError(
            f"Invalid verdict {verdict!r}; must be one of {sorted(Verdict)}"
        )

    if not reviewer_id or not reviewer_id.strip():
        raise ValueError("reviewer_id must be a non-empty string")

    if verdict == Verdict.APPROVED and (error_category or score_penalty):
        raise ValueError("approved reviews carry no error category or penalty")

    log = ReviewLog(
        assignment_id=assignment_id,
        reviewer_id=reviewer_id,
        verdict=str(verdict),
        comment=comment,
        error_category=error_category,
        score_penalty=score_penalty,
        created_at=datetime.now(timezone.utc),
        is_audited=False,
    )
    db_session.add(log)
    db_session.flush()

    logger.info(
        "Review recorded: log=%s assignment=%s verdict=%s penalty=%d",
        log.id, assignment_id, verdict, score_penalty,
    )
    return log


def mark_audited(
    db_session: Session,
    log: ReviewLog,
    manager_id: str,
    result: AuditResult,
) -> ReviewLog:
    """Attach the audit outcome to *log*; a log may be audited only once."""
    if log.is_audited:
        raise InvalidStateError("This review has already been audited")

    log.is_audited = True
    log.audit_result = str(result)
    log.audited_by = manager_id
    log.audited_at = datetime.now(timezone.utc)
    db_session.flush()

    logger.info("Review audited: log=%s result=%s", log.id, result)
    return log


def history_for_assignment(
    db_session: Session,
    assignment_id: int,
) -> list[ReviewLog]:
    """Return all ``ReviewLog`` rows for *assignment_id*, oldest first."""
    stmt = (
        select(ReviewLog)
        .where(ReviewLog.assignment_id == assignment_id)
        .order_by(ReviewLog.created_at.asc(), ReviewLog.id.asc())
    )
    return list(db_session.execute(stmt).scalars().all())


def list_unaudited(
    db_session: Session,
    project_id: int,
) -> list[ReviewLog]:
    """Return the audit backlog of *project_id*, oldest first."""
    stmt = (
        select(ReviewLog)
        .join(Assignment, Assignment.id == ReviewLog.assignment_id)
        .where(
            Assignment.project_id == project_id,
            ReviewLog.is_audited.is_(False),
        )
        .order_by(ReviewLog.created_at.asc(), ReviewLog.id.asc())
    )
    return list(db_session.execute(stmt).scalars().all())
