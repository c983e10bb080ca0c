"""Assignment lifecycle routes.

POST /assignments                 — route a data item to an annotator
POST /assignments/{id}/submit     — annotator hands the work in for review
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import get_assignment_service, get_current_user_id
from app.db.models import Assignment
from app.review.assignments import AssignmentService

router = APIRouter(prefix="/assignments", tags=["assignments"])


class AssignBody(BaseModel):
    project_id: int
    annotator_id: str
    data_item_id: int | None = None


def _serialize_assignment(assignment: Assignment) -> dict:
    return {
        "id": assignment.id,
        "project_id": assignment.project_id,
        "annotator_id": assignment.annotator_id,
        "data_item_id": assignment.data_item_id,
        "status": assignment.status,
        "submitted_at": assignment.submitted_at.isoformat() if assignment.submitted_at else None,
    }


@router.post("", summary="Create an assignment")
def create_assignment(body: AssignBody, svc: AssignmentService = Depends(get_assignment_service)):
    assignment = svc.assign(body.project_id, body.annotator_id, body.data_item_id)
    return _serialize_assignment(assignment)


@router.post("/{assignment_id}/submit", summary="Submit an assignment for review")
def submit_assignment(
    assignment_id: int,
    annotator_id: str = Depends(get_current_user_id),
    svc: AssignmentService = Depends(get_assignment_service),
):
    assignment = svc.submit(assignment_id, annotator_id)
    return _serialize_assignment(assignment)
