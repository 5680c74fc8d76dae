"""Business logic for exercises: CRUD, list views, reviews and stats."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from loguru import logger

from albook.core import scheduler
from albook.core.views import (
    ExerciseView,
    PageWindow,
    build_view_query,
    resolve_timezone,
    stats_predicates,
)
from albook.db.models.exercise import Exercise
from albook.db.repository import ExerciseRepository
from albook.utils.exceptions import NotFoundError, ReviewConflictError, ValidationError

DEFAULT_PAGE_SIZE = 10


@dataclass(slots=True)
class ExercisePage:
    """One page of a list view."""

    view: ExerciseView
    items: list[Exercise]
    total: int
    page: int
    total_pages: int


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _resolve_date_utc(value: datetime) -> datetime:
    try:
        return _utc(value)
    except OverflowError as exc:
        raise ValidationError("resolve_date is out of range", {"field": "resolve_date"}) from exc


def _require_title(title: str | None) -> str:
    if title is None or not title.strip():
        raise ValidationError("Title is required", {"field": "title"})
    return title


class ExerciseService:
    """High level operations over the exercise store.

    The repository is passed in explicitly so tests (and the CLI) can point the
    service at any session.
    """

    def __init__(
        self,
        repository: ExerciseRepository,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        tz: tzinfo | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.repository = repository
        self.page_size = page_size
        self.tz = tz or resolve_timezone(None)

    @staticmethod
    def _now(now: datetime | None) -> datetime:
        return _utc(now) if now is not None else datetime.now(timezone.utc)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    def create(
        self,
        *,
        title: str,
        source: str = "",
        source_id: str = "",
        link: str = "",
        tags: str = "",
        answer: str = "",
        resolve_date: datetime | None = None,
        now: datetime | None = None,
    ) -> int:
        """Insert a new exercise and return its id.

        Scheduling state always starts fresh: stage 0, no reviews, first due
        one day after the resolve date.
        """

        now = self._now(now)
        resolved_at = _resolve_date_utc(resolve_date) if resolve_date is not None else now
        try:
            next_review_date = scheduler.initial_review_date(resolved_at)
        except OverflowError as exc:
            raise ValidationError(
                "resolve_date is too late to schedule a review", {"field": "resolve_date"}
            ) from exc
        exercise = Exercise(
            title=_require_title(title),
            source=source,
            source_id=source_id,
            link=link,
            tags=tags,
            answer=answer,
            resolve_date=resolved_at,
            next_review_date=next_review_date,
            review_stage=0,
            review_count=0,
            created_at=now,
        )
        exercise_id = self.repository.insert(exercise)
        logger.info(f"Created exercise {exercise_id} ({exercise.title!r})")
        return exercise_id

    def get(self, exercise_id: int) -> Exercise:
        return self.repository.find_by_id(exercise_id)

    def update(
        self,
        exercise_id: int,
        *,
        title: str,
        source: str = "",
        source_id: str = "",
        link: str = "",
        tags: str = "",
        answer: str = "",
        resolve_date: datetime | None = None,
    ) -> Exercise:
        """Overwrite the descriptive fields of an exercise.

        Review progress is never touched here. ``resolve_date`` is only written
        when supplied, and does not move the next due date.
        """

        fields = {
            "title": _require_title(title),
            "source": source,
            "source_id": source_id,
            "link": link,
            "tags": tags,
            "answer": answer,
        }
        if resolve_date is not None:
            fields["resolve_date"] = _resolve_date_utc(resolve_date)
        exercise = self.repository.update(exercise_id, fields)
        logger.info(f"Updated exercise {exercise_id}")
        return exercise

    def delete(self, exercise_id: int) -> None:
        self.repository.delete(exercise_id)
        logger.info(f"Deleted exercise {exercise_id}")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def list_exercises(
        self,
        *,
        view: str | None = None,
        search: str | None = None,
        page: int = 1,
        now: datetime | None = None,
    ) -> ExercisePage:
        """Return one page of ``view`` narrowed by ``search``."""

        if page < 1:
            raise ValidationError("Page must be a positive integer", {"page": page})
        query = build_view_query(view, search, now=self._now(now), tz=self.tz)
        window = PageWindow(page=page, page_size=self.page_size)
        items, total = self.repository.query(
            query.predicate, query.order_by, limit=window.limit, offset=window.offset
        )
        return ExercisePage(
            view=query.view,
            items=items,
            total=total,
            page=page,
            total_pages=window.total_pages(total),
        )

    def stats(self, *, now: datetime | None = None) -> dict[str, int]:
        """Dashboard counters, computed with the list views' own predicates."""

        return self.repository.aggregate(stats_predicates(now=self._now(now), tz=self.tz))

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------
    def review(self, exercise_id: int, *, now: datetime | None = None) -> Exercise:
        """Advance an exercise one ladder stage and reschedule it."""

        now = self._now(now)
        exercise = self.repository.find_by_id(exercise_id)
        current_stage = exercise.review_stage or 0
        current_count = exercise.review_count or 0
        transition = scheduler.perform_review(current_stage, current_count, now)

        applied = self.repository.apply_review(
            exercise_id,
            expected_stage=current_stage,
            expected_count=current_count,
            transition=transition,
        )
        if not applied:
            if not self.repository.exists(exercise_id):
                raise NotFoundError.for_exercise(exercise_id)
            raise ReviewConflictError(
                "Exercise was reviewed concurrently, reload and try again",
                {"id": exercise_id},
            )

        logger.info(
            f"Reviewed exercise {exercise_id}: stage {current_stage} -> {transition.stage}, "
            f"next review {transition.next_review_date.isoformat()}"
        )
        return self.repository.find_by_id(exercise_id)
