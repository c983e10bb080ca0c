"""FastAPI dependency injection — database sessions, caller identity, and services."""
from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.audit.workflow import AuditWorkflow
from app.db.session import get_session_factory
from app.quality.ledger import StatsLedger
from app.review.assignments import AssignmentService
from app.review.queries import TaskQueryService
from app.review.workflow import ReviewWorkflow


def get_db() -> Generator[Session, None, None]:
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    db = get_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the caller id forwarded by the gateway in ``X-User-Id``."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_stats_ledger(db: Session = Depends(get_db)) -> StatsLedger:
    return StatsLedger(db)


def get_review_workflow(
    db: Session = Depends(get_db),
    ledger: StatsLedger = Depends(get_stats_ledger),
) -> ReviewWorkflow:
    """Return a ReviewWorkflow bound to the current DB session."""
    return ReviewWorkflow(db, ledger)


def get_audit_workflow(
    db: Session = Depends(get_db),
    ledger: StatsLedger = Depends(get_stats_ledger),
) -> AuditWorkflow:
    """Return an AuditWorkflow bound to the current DB session."""
    return AuditWorkflow(db, ledger)


def get_assignment_service(
    db: Session = Depends(get_db),
    ledger: StatsLedger = Depends(get_stats_ledger),
) -> AssignmentService:
    return AssignmentService(db, ledger)


def get_task_query_service(db: Session = Depends(get_db)) -> TaskQueryService:
    return TaskQueryService(db)
