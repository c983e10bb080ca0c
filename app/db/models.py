from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, JSON, String, Text, UniqueConstraint, func, text as sql_text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_per_label: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default=sql_text("0"))
    deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    manager_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    label_classes: Mapped[list[LabelClass]] = relationship(back_populates="project", order_by="LabelClass.id")
    data_items: Mapped[list[DataItem]] = relationship(back_populates="project")
    assignments: Mapped[list[Assignment]] = relationship(back_populates="project")


class LabelClass(Base):
    __tablename__ = "label_classes"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    guideline: Mapped[str | None] = mapped_column(Text, nullable=True)

    project: Mapped[Project] = relationship(back_populates="label_classes")


class DataItem(Base):
    __tablename__ = "data_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    storage_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="Pending", server_default=sql_text("'Pending'")
    )
    metadata_json: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    project: Mapped[Project] = relationship(back_populates="data_items")
    assignments: Mapped[list[Assignment]] = relationship(back_populates="data_item")


class Assignment(Base):
    """One work item routed to an annotator.

    ``status`` moves ``Assigned → Submitted → Completed | Rejected`` and never
    returns to ``Submitted``.
    """

    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    annotator_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    data_item_id: Mapped[int | None] = mapped_column(ForeignKey("data_items.id", ondelete="SET NULL"), nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="Assigned", server_default=sql_text("'Assigned'"), index=True
    )
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    project: Mapped[Project] = relationship(back_populates="assignments")
    data_item: Mapped[DataItem | None] = relationship(back_populates="assignments")
    annotations: Mapped[list[Annotation]] = relationship(back_populates="assignment", order_by="Annotation.id")
    review_logs: Mapped[list[ReviewLog]] = relationship(back_populates="assignment")


class Annotation(Base):
    """Stored labeling output for an assignment.

    Two legacy payload columns exist: ``data_json`` (current writers) and
    ``value`` (older writers).  Readers prefer ``data_json``.
    """

    __tablename__ = "annotations"

    id: Mapped[int] = mapped_column(primary_key=True)
    assignment_id: Mapped[int] = mapped_column(ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False)
    label_class_id: Mapped[int | None] = mapped_column(
        ForeignKey("label_classes.id", ondelete="SET NULL"), nullable=True
    )
    data_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    assignment: Mapped[Assignment] = relationship(back_populates="annotations")


class UserProjectStat(Base):
    """Running quality ledger for one (user, project) pair.

    The same row carries two independent field groups: the annotator group
    (approvals, quality average, efficiency, earnings) and the reviewer group
    (audit accuracy).  A user who both labels and reviews in a project has a
    single row with both groups populated.
    """

    __tablename__ = "user_project_stats"
    __table_args__ = (UniqueConstraint("user_id", "project_id", name="uq_user_project_stats_user_project"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)

    # annotator
    total_assigned: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=sql_text("0"))
    total_approved: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=sql_text("0"))
    total_rejected: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=sql_text("0"))
    total_reviewed_tasks: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=sql_text("0"))
    average_quality_score: Mapped[float] = mapped_column(
        Float, nullable=False, default=100.0, server_default=sql_text("100")
    )
    efficiency_score: Mapped[float] = mapped_column(Float, nullable=False, default=100.0, server_default=sql_text("100"))
    estimated_earnings: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default=sql_text("0"))
    total_critical_errors: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sql_text("0")
    )
    date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # reviewer
    reviewer_quality_score: Mapped[float] = mapped_column(
        Float, nullable=False, default=100.0, server_default=sql_text("100")
    )
    total_reviews_done: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=sql_text("0"))
    total_audited_reviews: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sql_text("0")
    )
    total_correct_decisions: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sql_text("0")
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class ReviewLog(Base):
    """Append-only record of one review decision.

    Only the audit columns (``is_audited``, ``audit_result``, ``audited_by``,
    ``audited_at``) are ever written after insert, and only once.
    """

    __tablename__ = "review_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reviewer_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    verdict: Mapped[str] = mapped_column(String(16), nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_category: Mapped[str | None] = mapped_column(String(256), nullable=True)
    score_penalty: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=sql_text("0"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    is_audited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=sql_text("false"))
    audit_result: Mapped[str | None] = mapped_column(String(16), nullable=True)
    audited_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    audited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    assignment: Mapped[Assignment] = relationship(back_populates="review_logs")
