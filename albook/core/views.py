"""Named list views over the exercise table.

A view is a predicate plus an ordering. The same predicate objects back both
the paginated list and the dashboard counters so the two can never disagree.
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from pathlib import Path
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from albook.core.scheduler import POOL_STAGE
from albook.db.models.exercise import Exercise

SEARCHABLE_COLUMNS = (
    Exercise.source_id,
    Exercise.title,
    Exercise.tags,
    Exercise.answer,
)


class ExerciseView(str, Enum):
    """Logical list views."""

    PENDING = "pending"
    POOL = "pool"
    REVIEWED_TODAY = "reviewed_today"
    SOLVED_TODAY = "solved_today"
    TOTAL = "total"


DEFAULT_VIEW = ExerciseView.PENDING

LOCALTIME_PATH = Path("/etc/localtime")


def resolve_view(name: str | None) -> ExerciseView:
    """Map a raw filter name to a view, falling back to ``pending``."""

    if not name:
        return DEFAULT_VIEW
    try:
        return ExerciseView(name.strip().lower())
    except ValueError:
        return DEFAULT_VIEW


def resolve_timezone(name: str | None) -> tzinfo:
    """Return the zone that defines the local calendar day."""

    if name:
        return ZoneInfo(name)
    return _host_timezone()


def _host_timezone() -> tzinfo:
    """Return the host zone with its DST rules, not just today's offset."""

    env_name = os.environ.get("TZ", "").lstrip(":")
    if env_name:
        try:
            return ZoneInfo(env_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Ignoring unknown TZ={env_name!r}")
    if LOCALTIME_PATH.is_file():
        with LOCALTIME_PATH.open("rb") as handle:
            return ZoneInfo.from_file(handle, key="localtime")
    logger.warning("Host timezone unknown, using UTC for day boundaries")
    return timezone.utc


def local_day_bounds(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """Return the UTC ``[start, end)`` range of the local day containing ``now``."""

    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local_date = now.astimezone(tz).date()
    start = datetime.combine(local_date, time.min, tzinfo=tz)
    end = datetime.combine(local_date + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def view_predicate(view: ExerciseView, *, now: datetime, tz: tzinfo) -> ColumnElement[bool]:
    """Return the selection predicate of ``view`` evaluated at ``now``."""

    if view is ExerciseView.PENDING:
        return and_(
            Exercise.next_review_date <= now,
            Exercise.review_stage < POOL_STAGE,
        )
    if view is ExerciseView.POOL:
        return Exercise.review_stage >= POOL_STAGE
    if view is ExerciseView.REVIEWED_TODAY:
        start, end = local_day_bounds(now, tz)
        return and_(Exercise.last_reviewed_at >= start, Exercise.last_reviewed_at < end)
    if view is ExerciseView.SOLVED_TODAY:
        start, end = local_day_bounds(now, tz)
        return and_(Exercise.resolve_date >= start, Exercise.resolve_date < end)
    return true()


def view_ordering(view: ExerciseView) -> tuple:
    """Return ORDER BY clauses for ``view``; ties fall back to the id."""

    if view is ExerciseView.PENDING:
        return (Exercise.next_review_date.asc(), Exercise.id.asc())
    return (Exercise.created_at.desc(), Exercise.id.desc())


def search_predicate(term: str | None) -> ColumnElement[bool] | None:
    """Case-insensitive substring match across the searchable columns."""

    if term is None:
        return None
    term = term.strip()
    if not term:
        return None
    return or_(*(column.icontains(term, autoescape=True) for column in SEARCHABLE_COLUMNS))


@dataclass(frozen=True, slots=True)
class ViewQuery:
    """Predicate and ordering ready to hand to the repository."""

    view: ExerciseView
    predicate: ColumnElement[bool]
    order_by: tuple


def build_view_query(
    view_name: str | None,
    search: str | None,
    *,
    now: datetime,
    tz: tzinfo,
) -> ViewQuery:
    view = resolve_view(view_name)
    predicate = view_predicate(view, now=now, tz=tz)
    matcher = search_predicate(search)
    if matcher is not None:
        predicate = and_(predicate, matcher)
    return ViewQuery(view=view, predicate=predicate, order_by=view_ordering(view))


def stats_predicates(*, now: datetime, tz: tzinfo) -> Mapping[str, ColumnElement[bool]]:
    """Predicates for the dashboard counters, keyed by response field."""

    return {
        "total_count": view_predicate(ExerciseView.TOTAL, now=now, tz=tz),
        "pool_count": view_predicate(ExerciseView.POOL, now=now, tz=tz),
        "pending_count": view_predicate(ExerciseView.PENDING, now=now, tz=tz),
        "reviewed_today_count": view_predicate(ExerciseView.REVIEWED_TODAY, now=now, tz=tz),
        "solved_today_count": view_predicate(ExerciseView.SOLVED_TODAY, now=now, tz=tz),
    }


@dataclass(frozen=True, slots=True)
class PageWindow:
    """1-indexed page of a fixed size."""

    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    def total_pages(self, total: int) -> int:
        return max(1, math.ceil(total / self.page_size))
