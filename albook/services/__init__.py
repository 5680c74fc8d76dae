"""Service layer package."""

from albook.services.exercises import ExercisePage, ExerciseService

__all__ = ["ExercisePage", "ExerciseService"]
