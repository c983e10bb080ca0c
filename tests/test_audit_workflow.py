"""Tests for app/audit/workflow.py — manager audits and reviewer accuracy."""
from __future__ import annotations

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from app.audit.review_log import record_review
from app.audit.workflow import AuditOutcome, AuditWorkflow
from app.core.errors import InvalidStateError, NotFoundError
from app.db.base import Base
from app.db.models import Assignment, Project, ReviewLog, UserProjectStat
from app.quality.ledger import KeyedLock, StatsLedger
from app.review.statuses import AuditResult, Verdict
from app.review.workflow import ReviewWorkflow


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    with Session() as session:
        yield session


@pytest.fixture()
def ledger(db_session) -> StatsLedger:
    return StatsLedger(db_session, locks=KeyedLock())


@pytest.fixture()
def audits(db_session, ledger) -> AuditWorkflow:
    return AuditWorkflow(db_session, ledger)


def _make_log(db_session, reviewer="reviewer-1", annotator="annotator-1", project=None) -> ReviewLog:
    if project is None:
        project = Project(name="Traffic", price_per_label=1.0)
        db_session.add(project)
        db_session.flush()
    assignment = Assignment(project_id=project.id, annotator_id=annotator, status="Completed")
    db_session.add(assignment)
    db_session.flush()
    log = record_review(db_session, assignment.id, reviewer, Verdict.APPROVED, comment="ok")
    db_session.commit()
    return log


def _stats(db_session, user_id) -> UserProjectStat | None:
    return db_session.execute(
        select(UserProjectStat).where(UserProjectStat.user_id == user_id)
    ).scalar_one_or_none()


# ===========================================================================
# Accuracy
# ===========================================================================

class TestReviewerAccuracy:
    def test_agree_then_disagree_scenario(self, db_session, audits):
        project = Project(name="Traffic", price_per_label=1.0)
        db_session.add(project)
        db_session.commit()
        first = _make_log(db_session, project=project)
        second = _make_log(db_session, project=project)

        out1 = audits.audit_review("manager-1", first.id, True)
        assert out1.reviewer_quality_score == 100.0

        out2 = audits.audit_review("manager-1", second.id, False)
        assert out2.reviewer_quality_score == 50.0

        stats = _stats(db_session, "reviewer-1")
        assert stats.total_audited_reviews == 2
        assert stats.total_correct_decisions == 1
        assert stats.reviewer_quality_score == 50.0

    def test_single_disagree_is_zero(self, db_session, audits):
        log = _make_log(db_session)

        outcome = audits.audit_review("manager-1", log.id, False)

        assert outcome.reviewer_quality_score == 0.0
        assert outcome.audit_result == AuditResult.DISAGREE

    def test_annotator_group_untouched(self, db_session, audits):
        log = _make_log(db_session)

        audits.audit_review("manager-1", log.id, True)

        stats = _stats(db_session, "reviewer-1")
        assert stats.average_quality_score == 100.0
        assert stats.total_reviewed_tasks == 0
        assert stats.total_reviews_done == 0
        assert _stats(db_session, "annotator-1") is None

    def test_outcome_fields(self, db_session, audits):
        log = _make_log(db_session, reviewer="reviewer-9")

        outcome = audits.audit_review("manager-1", log.id, True)

        assert outcome == AuditOutcome(
            review_log_id=log.id,
            reviewer_id="reviewer-9",
            audit_result=AuditResult.AGREE,
            reviewer_quality_score=100.0,
        )


# ===========================================================================
# Log mutation
# ===========================================================================

class TestLogUpdate:
    def test_audit_columns_set(self, db_session, audits):
        log = _make_log(db_session)

        audits.audit_review("manager-7", log.id, False)

        db_session.refresh(log)
        assert log.is_audited is True
        assert log.audit_result == "Disagree"
        assert log.audited_by == "manager-7"
        assert log.audited_at is not None

    def test_review_fields_unchanged(self, db_session, audits):
        log = _make_log(db_session)

        audits.audit_review("manager-1", log.id, True)

        db_session.refresh(log)
        assert log.verdict == "Approved"
        assert log.comment == "ok"
        assert log.reviewer_id == "reviewer-1"


# ===========================================================================
# Preconditions
# ===========================================================================

class TestPreconditions:
    def test_unknown_log(self, audits):
        with pytest.raises(NotFoundError, match="Review log not found"):
            audits.audit_review("manager-1", 999, True)

    def test_double_audit_rejected_and_stats_unchanged(self, db_session, audits):
        log = _make_log(db_session)
        audits.audit_review("manager-1", log.id, True)

        with pytest.raises(InvalidStateError, match="already been audited"):
            audits.audit_review("manager-2", log.id, False)

        stats = _stats(db_session, "reviewer-1")
        assert stats.total_audited_reviews == 1
        assert stats.total_correct_decisions == 1
        assert stats.reviewer_quality_score == 100.0
        db_session.refresh(log)
        assert log.audit_result == "Agree"
        assert log.audited_by == "manager-1"

    def test_missing_assignment(self, db_session, audits):
        log = record_review(db_session, 4242, "reviewer-1", Verdict.APPROVED)
        db_session.commit()

        with pytest.raises(NotFoundError, match="Assignment not found"):
            audits.audit_review("manager-1", log.id, True)

        assert _stats(db_session, "reviewer-1") is None
        db_session.refresh(log)
        assert log.is_audited is False


# ===========================================================================
# Both roles on one row
# ===========================================================================

class TestSharedRow:
    def test_user_who_annotates_and_reviews_shares_one_row(self, db_session, ledger, audits):
        project = Project(name="Traffic", price_per_label=1.0)
        db_session.add(project)
        db_session.commit()

        # dual-1 annotates work that someone else reviews...
        own = Assignment(project_id=project.id, annotator_id="dual-1", status="Submitted")
        db_session.add(own)
        db_session.commit()
        ReviewWorkflow(db_session, ledger, enforce_categories=False).submit_review(
            "reviewer-1", own.id, False, "loose", "TE-02: loose"
        )

        # ...and reviews work that a manager then audits.
        log = _make_log(db_session, reviewer="dual-1", project=project)
        audits.audit_review("manager-1", log.id, False)

        rows = ledger.list_for_project(project.id)
        dual = [r for r in rows if r.user_id == "dual-1"]
        assert len(dual) == 1
        assert dual[0].average_quality_score == 50.0
        assert dual[0].total_rejected == 1
        assert dual[0].reviewer_quality_score == 0.0
        assert dual[0].total_audited_reviews == 1
