from sqlalchemy import create_engine, inspect

from app.db.base import Base
from app.db import models  # noqa: F401


def _assert_default_contains(default_value: object, expected: str) -> None:
    assert default_value is not None
    normalized = str(default_value).lower().replace("(", "").replace(")", "").replace("'", "").strip()
    assert expected in normalized


def test_schema_creation_in_sqlite_includes_all_tables():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)

    table_names = set(inspect(engine).get_table_names())

    assert {
        "projects",
        "label_classes",
        "data_items",
        "assignments",
        "annotations",
        "user_project_stats",
        "review_logs",
    }.issubset(table_names)


def test_user_project_stats_key_and_defaults():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    inspector = inspect(engine)

    uniques = inspector.get_unique_constraints("user_project_stats")
    assert any(set(u["column_names"]) == {"user_id", "project_id"} for u in uniques)

    columns = {column["name"]: column for column in inspector.get_columns("user_project_stats")}
    _assert_default_contains(columns["average_quality_score"]["default"], "100")
    _assert_default_contains(columns["efficiency_score"]["default"], "100")
    _assert_default_contains(columns["reviewer_quality_score"]["default"], "100")
    _assert_default_contains(columns["total_approved"]["default"], "0")
    assert columns["version"]["nullable"] is False
    assert columns["date"]["nullable"] is True


def test_review_log_audit_columns():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    columns = {column["name"]: column for column in inspect(engine).get_columns("review_logs")}

    for name in ("audit_result", "audited_by", "audited_at", "error_category", "comment"):
        assert columns[name]["nullable"] is True
    assert columns["verdict"]["nullable"] is False
    _assert_default_contains(columns["is_audited"]["default"], "false")
    _assert_default_contains(columns["score_penalty"]["default"], "0")


def test_status_defaults():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    inspector = inspect(engine)

    assignment_columns = {c["name"]: c for c in inspector.get_columns("assignments")}
    _assert_default_contains(assignment_columns["status"]["default"], "assigned")
    item_columns = {c["name"]: c for c in inspector.get_columns("data_items")}
    _assert_default_contains(item_columns["status"]["default"], "pending")
