"""Tests for app/review/queries.py — pending-review projection."""
from __future__ import annotations

import logging
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.db.models import Annotation, Assignment, DataItem, LabelClass, Project
from app.review.queries import DEADLINE_UNSET, TaskQueryService, decode_annotation_payload

DEEPLY_NESTED = "[" * 100000 + "]" * 100000


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    with Session() as session:
        yield session


def _make_project(db_session, **kwargs) -> Project:
    project = Project(name=kwargs.pop("name", "Traffic"), price_per_label=1.0, **kwargs)
    db_session.add(project)
    db_session.commit()
    return project


def _make_assignment(db_session, project_id, status="Submitted", storage_url="s3://b/1.jpg") -> Assignment:
    item_id = None
    if storage_url is not None:
        item = DataItem(project_id=project_id, storage_url=storage_url)
        db_session.add(item)
        db_session.flush()
        item_id = item.id
    assignment = Assignment(project_id=project_id, annotator_id="annotator-1", data_item_id=item_id, status=status)
    db_session.add(assignment)
    db_session.commit()
    return assignment


# ===========================================================================
# decode_annotation_payload
# ===========================================================================

class TestDecodePayload:
    def test_primary_used_when_present(self):
        assert decode_annotation_payload('{"a": 1}', '{"b": 2}') == {"a": 1}

    @pytest.mark.parametrize("primary", [None, ""])
    def test_fallback_when_primary_empty(self, primary):
        assert decode_annotation_payload(primary, "[1, 2]") == [1, 2]

    def test_both_empty(self):
        assert decode_annotation_payload(None, "") is None

    def test_malformed_primary_does_not_fall_back(self):
        assert decode_annotation_payload("{not json", '{"b": 2}') is None

    def test_json_null_dropped(self):
        assert decode_annotation_payload("null", None) is None

    def test_empty_object_kept(self):
        assert decode_annotation_payload("{}", None) == {}

    def test_deeply_nested_payload_dropped(self):
        assert decode_annotation_payload(DEEPLY_NESTED, None) is None


# ===========================================================================
# list_pending_review
# ===========================================================================

class TestListPendingReview:
    def test_only_submitted_in_project_by_id(self, db_session):
        project = _make_project(db_session)
        other = _make_project(db_session, name="Other")
        a1 = _make_assignment(db_session, project.id)
        _make_assignment(db_session, project.id, status="Assigned")
        _make_assignment(db_session, project.id, status="Completed")
        _make_assignment(db_session, other.id)
        a2 = _make_assignment(db_session, project.id)

        views = TaskQueryService(db_session).list_pending_review(project.id)

        assert [v.assignment_id for v in views] == [a1.id, a2.id]
        assert all(v.status == "Submitted" for v in views)

    def test_fields_from_project_and_item(self, db_session):
        deadline = datetime(2026, 12, 31, 12, 0, 0)
        project = _make_project(db_session, deadline=deadline)
        db_session.add_all([
            LabelClass(project_id=project.id, name="car", color="#ff0000", guideline="Whole vehicle"),
            LabelClass(project_id=project.id, name="bus", color="#00ff00"),
        ])
        db_session.commit()
        a = _make_assignment(db_session, project.id, storage_url="s3://b/frame.jpg")

        [view] = TaskQueryService(db_session).list_pending_review(project.id)

        assert view.assignment_id == a.id
        assert view.data_item_id == a.data_item_id
        assert view.storage_url == "s3://b/frame.jpg"
        assert view.project_name == "Traffic"
        assert view.deadline.replace(tzinfo=None) == deadline
        assert [lc.name for lc in view.labels] == ["car", "bus"]
        assert view.labels[0].guideline == "Whole vehicle"
        assert view.labels[1].guideline is None

    def test_defaults_for_missing_data(self, db_session):
        project = _make_project(db_session)
        _make_assignment(db_session, project.id, storage_url=None)

        [view] = TaskQueryService(db_session).list_pending_review(project.id)

        assert view.data_item_id is None
        assert view.storage_url == ""
        assert view.deadline == DEADLINE_UNSET
        assert view.labels == []
        assert view.existing_annotations == []

    def test_missing_project_still_listed(self, db_session):
        a = _make_assignment(db_session, project_id=777, storage_url=None)

        [view] = TaskQueryService(db_session).list_pending_review(777)

        assert view.assignment_id == a.id
        assert view.project_name == ""
        assert view.deadline == DEADLINE_UNSET

    def test_annotations_decoded_and_bad_ones_dropped(self, db_session, caplog):
        project = _make_project(db_session)
        a = _make_assignment(db_session, project.id)
        db_session.add_all([
            Annotation(assignment_id=a.id, data_json='{"box": [1, 2, 3, 4]}'),
            Annotation(assignment_id=a.id, data_json=None, value='{"label": "car"}'),
            Annotation(assignment_id=a.id, data_json="{broken"),
            Annotation(assignment_id=a.id, data_json=None, value=None),
        ])
        db_session.commit()

        with caplog.at_level(logging.WARNING, logger="app.review.queries"):
            [view] = TaskQueryService(db_session).list_pending_review(project.id)

        assert view.existing_annotations == [{"box": [1, 2, 3, 4]}, {"label": "car"}]
        assert caplog.text.count("Annotation payload dropped") == 1

    def test_deeply_nested_annotation_does_not_break_listing(self, db_session, caplog):
        project = _make_project(db_session)
        a1 = _make_assignment(db_session, project.id)
        a2 = _make_assignment(db_session, project.id)
        db_session.add_all([
            Annotation(assignment_id=a1.id, data_json=DEEPLY_NESTED),
            Annotation(assignment_id=a1.id, data_json='{"box": [1, 2, 3, 4]}'),
            Annotation(assignment_id=a2.id, data_json='{"label": "bus"}'),
        ])
        db_session.commit()

        with caplog.at_level(logging.WARNING, logger="app.review.queries"):
            views = TaskQueryService(db_session).list_pending_review(project.id)

        assert [v.assignment_id for v in views] == [a1.id, a2.id]
        assert views[0].existing_annotations == [{"box": [1, 2, 3, 4]}]
        assert views[1].existing_annotations == [{"label": "bus"}]
        assert caplog.text.count("Annotation payload dropped") == 1

    def test_empty_project(self, db_session):
        project = _make_project(db_session)
        assert TaskQueryService(db_session).list_pending_review(project.id) == []

    def test_listing_does_not_mutate(self, db_session):
        project = _make_project(db_session)
        a = _make_assignment(db_session, project.id)

        TaskQueryService(db_session).list_pending_review(project.id)

        assert not db_session.dirty
        assert not db_session.new
        db_session.refresh(a)
        assert a.status == "Submitted"
