"""Review and audit routes.

POST /review/submit                        — approve or reject a submitted assignment
POST /review/audit                         — manager agrees/disagrees with a past review
GET  /review/project/{project_id}          — assignments awaiting review
GET  /review/error-categories              — rejection category catalog
GET  /review/assignments/{id}/history      — review log of one assignment
GET  /review/logs/unaudited?project_id=    — audit backlog of a project

Engine errors (not found, invalid state) are translated by
``app.api.errors``; review comments are never echoed into logs.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import (
    get_audit_workflow,
    get_current_user_id,
    get_db,
    get_review_workflow,
    get_task_query_service,
)
from app.audit.review_log import history_for_assignment, list_unaudited
from app.audit.workflow import AuditWorkflow
from app.db.models import ReviewLog
from app.quality.error_categories import all_display_strings
from app.review.queries import TaskQueryService, TaskView
from app.review.workflow import ReviewWorkflow

router = APIRouter(prefix="/review", tags=["review"])


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class ReviewBody(BaseModel):
    assignment_id: int
    is_approved: bool
    comment: str = ""
    error_category: str | None = None


class AuditBody(BaseModel):
    review_log_id: int
    is_correct_decision: bool


class MessageResponse(BaseModel):
    message: str = Field(..., examples=["Approved"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _serialize_task(view: TaskView) -> dict:
    return {
        "assignment_id": view.assignment_id,
        "data_item_id": view.data_item_id,
        "storage_url": view.storage_url,
        "project_name": view.project_name,
        "status": view.status,
        "deadline": view.deadline.isoformat(),
        "labels": [
            {"id": lc.id, "name": lc.name, "color": lc.color, "guideline": lc.guideline}
            for lc in view.labels
        ],
        "existing_annotations": view.existing_annotations,
    }


def _serialize_log(log: ReviewLog) -> dict:
    return {
        "id": log.id,
        "assignment_id": log.assignment_id,
        "reviewer_id": log.reviewer_id,
        "verdict": log.verdict,
        "error_category": log.error_category,
        "score_penalty": log.score_penalty,
        "created_at": log.created_at.isoformat() if log.created_at else None,
        "is_audited": log.is_audited,
        "audit_result": log.audit_result,
    }


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("/submit", summary="Approve or reject a submitted assignment", response_model=MessageResponse)
def submit_review(
    body: ReviewBody,
    reviewer_id: str = Depends(get_current_user_id),
    wf: ReviewWorkflow = Depends(get_review_workflow),
):
    verdict = wf.submit_review(
        reviewer_id,
        body.assignment_id,
        body.is_approved,
        comment=body.comment,
        error_category=body.error_category,
    )
    return {"message": str(verdict)}


@router.post("/audit", summary="Audit a past review decision", response_model=MessageResponse)
def audit_review(
    body: AuditBody,
    manager_id: str = Depends(get_current_user_id),
    wf: AuditWorkflow = Depends(get_audit_workflow),
):
    wf.audit_review(manager_id, body.review_log_id, body.is_correct_decision)
    return {"message": "Audit submitted successfully"}


@router.get("/project/{project_id}", summary="List assignments awaiting review")
def get_tasks_for_review(
    project_id: int,
    queries: TaskQueryService = Depends(get_task_query_service),
):
    return [_serialize_task(v) for v in queries.list_pending_review(project_id)]


@router.get("/error-categories", summary="List rejection error categories")
def get_error_categories() -> list[str]:
    return all_display_strings()


@router.get("/assignments/{assignment_id}/history", summary="Review history of an assignment")
def get_assignment_history(assignment_id: int, db: Session = Depends(get_db)):
    return [_serialize_log(log) for log in history_for_assignment(db, assignment_id)]


@router.get("/logs/unaudited", summary="Reviews not yet audited in a project")
def get_unaudited(project_id: int, db: Session = Depends(get_db)):
    return [_serialize_log(log) for log in list_unaudited(db, project_id)]
