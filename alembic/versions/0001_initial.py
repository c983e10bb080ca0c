"""Initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price_per_label", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("manager_id", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "label_classes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("color", sa.String(length=32), nullable=True),
        sa.Column("guideline", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "data_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("storage_url", sa.String(length=2048), nullable=True),
        sa.Column("status", sa.String(length=32), server_default=sa.text("'Pending'"), nullable=False),
        sa.Column("metadata_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("annotator_id", sa.String(length=128), nullable=False),
        sa.Column("data_item_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=32), server_default=sa.text("'Assigned'"), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["data_item_id"], ["data_items.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_assignments_project_id", "assignments", ["project_id"])
    op.create_index("ix_assignments_annotator_id", "assignments", ["annotator_id"])
    op.create_index("ix_assignments_status", "assignments", ["status"])

    op.create_table(
        "annotations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("assignment_id", sa.Integer(), nullable=False),
        sa.Column("label_class_id", sa.Integer(), nullable=True),
        sa.Column("data_json", sa.Text(), nullable=True),
        sa.Column("value", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["assignment_id"], ["assignments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["label_class_id"], ["label_classes.id"], ondelete="SET NULL"),
    )

    op.create_table(
        "user_project_stats",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("total_assigned", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_approved", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_rejected", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_reviewed_tasks", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("average_quality_score", sa.Float(), server_default=sa.text("100"), nullable=False),
        sa.Column("efficiency_score", sa.Float(), server_default=sa.text("100"), nullable=False),
        sa.Column("estimated_earnings", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_critical_errors", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewer_quality_score", sa.Float(), server_default=sa.text("100"), nullable=False),
        sa.Column("total_reviews_done", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_audited_reviews", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_correct_decisions", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "project_id", name="uq_user_project_stats_user_project"),
    )

    op.create_table(
        "review_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("assignment_id", sa.Integer(), nullable=False),
        sa.Column("reviewer_id", sa.String(length=128), nullable=False),
        sa.Column("verdict", sa.String(length=16), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("error_category", sa.String(length=256), nullable=True),
        sa.Column("score_penalty", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("is_audited", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("audit_result", sa.String(length=16), nullable=True),
        sa.Column("audited_by", sa.String(length=128), nullable=True),
        sa.Column("audited_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["assignment_id"], ["assignments.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_review_logs_assignment_id", "review_logs", ["assignment_id"])
    op.create_index("ix_review_logs_reviewer_id", "review_logs", ["reviewer_id"])


def downgrade() -> None:
    op.drop_table("review_logs")
    op.drop_table("user_project_stats")
    op.drop_table("annotations")
    op.drop_table("assignments")
    op.drop_table("data_items")
    op.drop_table("label_classes")
    op.drop_table("projects")
