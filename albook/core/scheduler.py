"""Fixed-ladder review scheduler.

Every exercise sits on a stage of a short interval ladder. A review moves it
one stage up and pushes its next due date out by the interval of the stage it
lands on:

======  ===========  =========
stage   meaning      interval
======  ===========  =========
0       new          1 day (first exposure, counted from the resolve date)
1       learning     3 days
2       learning     7 days
3       pool         30 days
======  ===========  =========

Stages never go past :data:`POOL_STAGE`; reviewing a pool item keeps it in the
pool and schedules it another pool interval ahead. The functions here are pure
and do no I/O, so callers decide when "now" is and how to persist the result.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

POOL_STAGE = 3

FIRST_EXPOSURE_INTERVAL = timedelta(days=1)

LADDER: dict[int, timedelta] = {
    0: FIRST_EXPOSURE_INTERVAL,
    1: timedelta(days=3),
    2: timedelta(days=7),
    POOL_STAGE: timedelta(days=30),
}


@dataclass(frozen=True, slots=True)
class ReviewTransition:
    """Scheduling fields produced by a single review."""

    stage: int
    count: int
    next_review_date: datetime
    last_reviewed_at: datetime


def _ensure_timezone(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def interval_for_stage(stage: int) -> timedelta:
    """Return the review interval for ``stage``.

    Defined for every non-negative stage; anything at or beyond the pool stage
    uses the pool interval.
    """

    if stage < 0:
        raise ValueError(f"Review stage must be non-negative, got {stage}")
    return LADDER[min(stage, POOL_STAGE)]


def is_pool_stage(stage: int) -> bool:
    return stage >= POOL_STAGE


def initial_review_date(resolve_date: datetime) -> datetime:
    """Return the first due date of an exercise resolved at ``resolve_date``."""

    return _ensure_timezone(resolve_date) + FIRST_EXPOSURE_INTERVAL


def perform_review(current_stage: int, current_count: int, now: datetime) -> ReviewTransition:
    """Advance an exercise one stage and compute its next due date."""

    if current_count < 0:
        raise ValueError(f"Review count must be non-negative, got {current_count}")
    now = _ensure_timezone(now)
    stage = min(max(current_stage, 0) + 1, POOL_STAGE)
    return ReviewTransition(
        stage=stage,
        count=current_count + 1,
        next_review_date=now + interval_for_stage(stage),
        last_reviewed_at=now,
    )


__all__ = [
    "FIRST_EXPOSURE_INTERVAL",
    "LADDER",
    "POOL_STAGE",
    "ReviewTransition",
    "initial_review_date",
    "interval_for_stage",
    "is_pool_stage",
    "perform_review",
]
