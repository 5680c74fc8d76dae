"""Exercise CRUD, list and review endpoints."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from albook.api import deps
from albook.schemas import (
    ExerciseCreate,
    ExerciseCreated,
    ExerciseListResponse,
    ExerciseRead,
    ExerciseUpdate,
    StatusResponse,
)
from albook.services.exercises import ExerciseService

router = APIRouter(prefix="/exercises", tags=["exercises"])

# Ids are SQLite INTEGERs; larger values cannot be bound at all.
MAX_EXERCISE_ID = 2**63 - 1
MAX_PAGE = 2**31 - 1

ExerciseId = Annotated[int, Path(ge=1, le=MAX_EXERCISE_ID, description="Exercise identifier")]


@router.get("", response_model=ExerciseListResponse)
def list_exercises(
    view: str | None = Query(
        default=None,
        alias="filter",
        description="View name: pending, pool, reviewed_today, solved_today or total",
    ),
    search: str | None = Query(default=None, description="Substring matched against id, title, tags, answer"),
    page: int = Query(default=1, ge=1, le=MAX_PAGE, description="1-indexed page number"),
    service: ExerciseService = Depends(deps.get_exercise_service),
) -> ExerciseListResponse:
    """Return one page of exercises for the requested view."""

    result = service.list_exercises(view=view, search=search, page=page)
    return ExerciseListResponse(
        data=[ExerciseRead.model_validate(item) for item in result.items],
        total=result.total,
        page=result.page,
        total_pages=result.total_pages,
    )


@router.post("", response_model=ExerciseCreated, status_code=status.HTTP_201_CREATED)
def create_exercise(
    payload: ExerciseCreate,
    service: ExerciseService = Depends(deps.get_exercise_service),
) -> ExerciseCreated:
    """Register a newly solved exercise."""

    exercise_id = service.create(**payload.model_dump())
    return ExerciseCreated(id=exercise_id)


@router.get("/{exercise_id}", response_model=ExerciseRead)
def get_exercise(
    exercise_id: ExerciseId,
    service: ExerciseService = Depends(deps.get_exercise_service),
) -> ExerciseRead:
    """Retrieve an exercise by identifier."""

    return ExerciseRead.model_validate(service.get(exercise_id))


@router.put("/{exercise_id}", response_model=StatusResponse)
def update_exercise(
    exercise_id: ExerciseId,
    payload: ExerciseUpdate,
    service: ExerciseService = Depends(deps.get_exercise_service),
) -> StatusResponse:
    """Edit descriptive fields; review progress is left alone."""

    service.update(exercise_id, **payload.model_dump())
    return StatusResponse(status="updated")


@router.delete("/{exercise_id}", response_model=StatusResponse)
def delete_exercise(
    exercise_id: ExerciseId,
    service: ExerciseService = Depends(deps.get_exercise_service),
) -> StatusResponse:
    service.delete(exercise_id)
    return StatusResponse(status="deleted")


@router.post("/{exercise_id}/review", response_model=ExerciseRead)
def review_exercise(
    exercise_id: ExerciseId,
    service: ExerciseService = Depends(deps.get_exercise_service),
) -> ExerciseRead:
    """Mark an exercise as reviewed and return its new schedule."""

    return ExerciseRead.model_validate(service.review(exercise_id))
