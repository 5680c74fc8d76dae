"""Tests for the fixed review ladder."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from albook.core.scheduler import (
    POOL_STAGE,
    initial_review_date,
    interval_for_stage,
    is_pool_stage,
    perform_review,
)

NOW = datetime(2024, 1, 5, 9, 30, tzinfo=timezone.utc)


def test_initial_review_is_one_day_after_resolve_date() -> None:
    resolved = datetime(2024, 1, 1, tzinfo=timezone.utc)

    assert initial_review_date(resolved) == datetime(2024, 1, 2, tzinfo=timezone.utc)


def test_naive_resolve_date_is_treated_as_utc() -> None:
    assert initial_review_date(datetime(2024, 1, 1)) == datetime(2024, 1, 2, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("stage", "days"),
    [(0, 1), (1, 3), (2, 7), (3, 30), (4, 30), (12, 30)],
)
def test_interval_is_defined_for_every_stage(stage: int, days: int) -> None:
    assert interval_for_stage(stage) == timedelta(days=days)


def test_negative_stage_is_rejected() -> None:
    with pytest.raises(ValueError):
        interval_for_stage(-1)


def test_first_review_moves_to_stage_one() -> None:
    transition = perform_review(0, 0, NOW)

    assert transition.stage == 1
    assert transition.count == 1
    assert transition.next_review_date == NOW + timedelta(days=3)
    assert transition.last_reviewed_at == NOW


def test_successive_reviews_climb_then_stay_in_pool() -> None:
    stage, count = 0, 0
    stages = []
    for offset in range(5):
        now = NOW + timedelta(days=offset)
        transition = perform_review(stage, count, now)
        assert transition.count == count + 1
        assert transition.stage >= stage
        stage, count = transition.stage, transition.count
        stages.append(stage)

    assert stages == [1, 2, 3, 3, 3]
    assert count == 5
    assert is_pool_stage(stage)


def test_pool_review_keeps_extending_by_pool_interval() -> None:
    transition = perform_review(POOL_STAGE, 7, NOW)

    assert transition.stage == POOL_STAGE
    assert transition.count == 8
    assert transition.next_review_date == NOW + timedelta(days=30)


def test_stage_above_pool_is_clamped() -> None:
    transition = perform_review(9, 9, NOW)

    assert transition.stage == POOL_STAGE
    assert transition.next_review_date == NOW + timedelta(days=30)


def test_negative_count_is_rejected() -> None:
    with pytest.raises(ValueError):
        perform_review(0, -1, NOW)
