"""Dashboard counters."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from albook.api import deps
from albook.schemas import DashboardStats
from albook.services.exercises import ExerciseService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardStats)
def get_dashboard(
    service: ExerciseService = Depends(deps.get_exercise_service),
) -> DashboardStats:
    """Return pending, pool, total and today's counts."""

    return DashboardStats(**service.stats())
