#!/usr/bin/env python3
"""Seed demo data: one project with labels, six data items, reviewed and audited work.

Usage:
    python scripts/seed_demo.py          # uses DATABASE_URL from env / .env
    DATABASE_URL=... python scripts/seed_demo.py
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.audit.review_log import list_unaudited
from app.audit.workflow import AuditWorkflow
from app.core.settings import get_settings
from app.db.base import Base
from app.db.models import Annotation, DataItem, LabelClass, Project
from app.review.assignments import AssignmentService
from app.review.workflow import ReviewWorkflow


def seed(session: Session) -> None:
    """Insert a demo project and push its assignments through review and audit."""

    project = Project(
        name="Street traffic boxes",
        description="Bounding boxes for vehicles in dashcam frames",
        price_per_label=0.25,
        deadline=datetime.now(timezone.utc) + timedelta(days=30),
        manager_id="demo-manager",
    )
    session.add(project)
    session.flush()

    for name, color in (("car", "#e6194b"), ("bus", "#3cb44b"), ("motorbike", "#4363d8")):
        session.add(LabelClass(project_id=project.id, name=name, color=color, guideline=f"Box every visible {name}"))

    items = []
    for idx in range(6):
        item = DataItem(project_id=project.id, storage_url=f"s3://demo-frames/frame_{idx:04d}.jpg")
        session.add(item)
        items.append(item)
    session.commit()

    assignments = AssignmentService(session)
    annotators = ["annotator-1", "annotator-2"]
    created = []
    for idx, item in enumerate(items):
        annotator = annotators[idx % len(annotators)]
        assignment = assignments.assign(project.id, annotator, item.id)
        session.add(Annotation(assignment_id=assignment.id, data_json='{"label": "car", "box": [10, 20, 110, 90]}'))
        session.commit()
        assignments.submit(assignment.id, annotator)
        created.append(assignment)

    # Leave the last two assignments pending review
    review = ReviewWorkflow(session)
    verdicts = [
        (True, None),
        (False, "TE-02: Box too loose (too much background)"),
        (True, None),
        (False, "LU-01: Incorrect label definition (bus labeled as car)"),
    ]
    for assignment, (approved, category) in zip(created, verdicts):
        review.submit_review("reviewer-1", assignment.id, approved, comment="demo review", error_category=category)

    audit = AuditWorkflow(session)
    for idx, log in enumerate(list_unaudited(session, project.id)[:2]):
        audit.audit_review("demo-manager", log.id, is_correct_decision=(idx == 0))

    print(f"Seeded project {project.id}: {len(items)} data items, {len(verdicts)} reviews, 2 audits.")


def main() -> None:
    settings = get_settings()
    engine = create_engine(settings.database_url)
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        seed(session)


if __name__ == "__main__":
    main()
