"""Database models package."""
from albook.db.models.exercise import Exercise

__all__ = [
    "Exercise",
]
