"""Pydantic schemas package."""

from albook.schemas.exercise import (
    DashboardStats,
    ExerciseCreate,
    ExerciseCreated,
    ExerciseListResponse,
    ExerciseRead,
    ExerciseUpdate,
    StatusResponse,
)

__all__ = [
    "DashboardStats",
    "ExerciseCreate",
    "ExerciseCreated",
    "ExerciseListResponse",
    "ExerciseRead",
    "ExerciseUpdate",
    "StatusResponse",
]
