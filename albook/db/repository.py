"""Persistence gateway for exercises."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from loguru import logger
from sqlalchemy import case, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from albook.core.scheduler import ReviewTransition
from albook.db.models.exercise import Exercise
from albook.utils.exceptions import NotFoundError, StorageError

DESCRIPTIVE_FIELDS = frozenset(
    {"source", "source_id", "title", "link", "tags", "answer", "resolve_date"}
)


class ExerciseRepository:
    """CRUD, filtered queries and aggregates over the ``exercises`` table.

    Every write commits on its own; any SQLAlchemy failure rolls the session
    back and surfaces as :class:`StorageError`, leaving the row unchanged.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _fail(self, action: str, exc: SQLAlchemyError) -> StorageError:
        self.db.rollback()
        logger.error(f"Failed to {action}: {exc}")
        return StorageError(f"Failed to {action}", {"error": str(exc)})

    def insert(self, exercise: Exercise) -> int:
        try:
            self.db.add(exercise)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("insert exercise", exc) from exc
        return exercise.id

    def find_by_id(self, exercise_id: int) -> Exercise:
        try:
            exercise = self.db.get(Exercise, exercise_id)
        except SQLAlchemyError as exc:
            raise self._fail("load exercise", exc) from exc
        if exercise is None:
            raise NotFoundError.for_exercise(exercise_id)
        return exercise

    def update(self, exercise_id: int, fields: Mapping[str, Any]) -> Exercise:
        """Write descriptive fields only; anything else is rejected."""

        illegal = set(fields) - DESCRIPTIVE_FIELDS
        if illegal:
            raise ValueError(f"Refusing to update non-descriptive fields: {sorted(illegal)}")
        exercise = self.find_by_id(exercise_id)
        try:
            for name, value in fields.items():
                setattr(exercise, name, value)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("update exercise", exc) from exc
        return exercise

    def delete(self, exercise_id: int) -> None:
        try:
            result = self.db.execute(delete(Exercise).where(Exercise.id == exercise_id))
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete exercise", exc) from exc
        if result.rowcount == 0:
            raise NotFoundError.for_exercise(exercise_id)

    def query(
        self,
        predicate: ColumnElement[bool],
        order_by: Sequence[Any],
        limit: int,
        offset: int,
    ) -> tuple[list[Exercise], int]:
        """Return one page of matching rows and the total number of matches."""

        count_stmt = select(func.count()).select_from(Exercise).where(predicate)
        data_stmt = (
            select(Exercise).where(predicate).order_by(*order_by).limit(limit).offset(offset)
        )
        try:
            total = int(self.db.scalar(count_stmt) or 0)
            records = list(self.db.scalars(data_stmt))
        except SQLAlchemyError as exc:
            raise self._fail("query exercises", exc) from exc
        return records, total

    def aggregate(self, predicates: Mapping[str, ColumnElement[bool]]) -> dict[str, int]:
        """Count rows matching each predicate in a single pass."""

        names = list(predicates)
        columns = [
            func.coalesce(func.sum(case((predicates[name], 1), else_=0)), 0).label(name)
            for name in names
        ]
        try:
            row = self.db.execute(select(*columns).select_from(Exercise)).one()
        except SQLAlchemyError as exc:
            raise self._fail("aggregate exercises", exc) from exc
        return {name: int(row[index]) for index, name in enumerate(names)}

    def apply_review(
        self,
        exercise_id: int,
        *,
        expected_stage: int,
        expected_count: int,
        transition: ReviewTransition,
    ) -> bool:
        """Persist ``transition`` if the row still has the stage/count it was read with.

        Returns ``False`` when no row matched, i.e. the exercise was deleted or
        another review landed in between.
        """

        stmt = (
            update(Exercise)
            .where(
                Exercise.id == exercise_id,
                Exercise.review_stage == expected_stage,
                Exercise.review_count == expected_count,
            )
            .values(
                review_stage=transition.stage,
                review_count=transition.count,
                next_review_date=transition.next_review_date,
                last_reviewed_at=transition.last_reviewed_at,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
            self.db.expire_all()
        except SQLAlchemyError as exc:
            raise self._fail("record review", exc) from exc
        return result.rowcount == 1

    def exists(self, exercise_id: int) -> bool:
        try:
            found = self.db.scalar(select(Exercise.id).where(Exercise.id == exercise_id))
        except SQLAlchemyError as exc:
            raise self._fail("load exercise", exc) from exc
        return found is not None
