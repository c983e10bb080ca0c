"""Quality ledger read routes.

GET /stats/projects/{project_id}                  — every user's stats in a project
GET /stats/projects/{project_id}/users/{user_id}  — one user's stats
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_stats_ledger
from app.db.models import UserProjectStat
from app.quality.ledger import StatsLedger

router = APIRouter(prefix="/stats", tags=["stats"])


def _serialize_stat(stat: UserProjectStat) -> dict:
    return {
        "user_id": stat.user_id,
        "project_id": stat.project_id,
        "annotator": {
            "total_assigned": stat.total_assigned,
            "total_approved": stat.total_approved,
            "total_rejected": stat.total_rejected,
            "total_reviewed_tasks": stat.total_reviewed_tasks,
            "average_quality_score": stat.average_quality_score,
            "efficiency_score": stat.efficiency_score,
            "estimated_earnings": stat.estimated_earnings,
            "total_critical_errors": stat.total_critical_errors,
        },
        "reviewer": {
            "reviewer_quality_score": stat.reviewer_quality_score,
            "total_reviews_done": stat.total_reviews_done,
            "total_audited_reviews": stat.total_audited_reviews,
            "total_correct_decisions": stat.total_correct_decisions,
        },
        "date": stat.date.isoformat() if stat.date else None,
    }


@router.get("/projects/{project_id}", summary="List quality stats for a project")
def list_project_stats(project_id: int, ledger: StatsLedger = Depends(get_stats_ledger)):
    return [_serialize_stat(s) for s in ledger.list_for_project(project_id)]


@router.get("/projects/{project_id}/users/{user_id}", summary="Get one user's quality stats")
def get_user_stats(project_id: int, user_id: str, ledger: StatsLedger = Depends(get_stats_ledger)):
    stat = ledger.get(user_id, project_id)
    if stat is None:
        raise HTTPException(status_code=404, detail=f"No stats for user {user_id} in project {project_id}")
    return _serialize_stat(stat)
