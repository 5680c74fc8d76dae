"""Shared API dependencies."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from albook.config import settings
from albook.core.views import resolve_timezone
from albook.db.repository import ExerciseRepository
from albook.db.session import get_db
from albook.services.exercises import ExerciseService

__all__ = ["get_db", "get_exercise_service"]


def get_exercise_service(db: Session = Depends(get_db)) -> ExerciseService:
    """Assemble the exercise service around a request-scoped session."""

    return ExerciseService(
        ExerciseRepository(db),
        page_size=settings.PAGE_SIZE,
        tz=resolve_timezone(settings.TIMEZONE),
    )
