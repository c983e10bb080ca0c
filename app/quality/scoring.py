"""Quality scoring rules.

Pure functions: no database access.  The workflows feed them counters read
from ``UserProjectStat`` and write the results back.
"""
from __future__ import annotations

MAX_SCORE = 100.0
PENALTY_PER_WEIGHT = 10


def penalty_for_weight(weight: int) -> int:
    """Return the score penalty for a rejection with severity *weight*."""
    return weight * PENALTY_PER_WEIGHT


def task_score(approved: bool, weight: int = 0) -> float:
    """Return the 0–100 score for one reviewed assignment."""
    if approved:
        return MAX_SCORE
    return max(0.0, MAX_SCORE - penalty_for_weight(weight))


def running_average(previous_average: float, previous_count: int, score: float) -> float:
    """Fold *score* into a mean taken over *previous_count* earlier scores."""
    total = previous_average * previous_count + score
    return round(total / (previous_count + 1), 2)


def efficiency_score(total_approved: int, total_assigned: int) -> float:
    """Approved-to-assigned ratio as a percentage, clamped to [0, 100].

    Returns 0 when nothing has been assigned.
    """
    if total_assigned <= 0:
        return 0.0
    return min(MAX_SCORE, max(0.0, total_approved / total_assigned * 100))


def reviewer_quality_score(total_correct: int, total_audited: int) -> float:
    """Percentage of audited reviews judged correct, rounded to 2 decimals."""
    if total_audited <= 0:
        return MAX_SCORE
    return round(total_correct / total_audited * 100, 2)
