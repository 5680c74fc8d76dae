"""Pydantic schemas for exercise endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExerciseFields(BaseModel):
    """Descriptive fields shared by create and update payloads.

    Scheduling fields (stage, count, due dates) are deliberately absent;
    clients cannot set them and any such keys in a payload are ignored.
    """

    title: str = Field(..., min_length=1, description="Required display title")
    source: str = ""
    source_id: str = ""
    link: str = ""
    tags: str = ""
    answer: str = ""
    resolve_date: Optional[datetime] = Field(
        None, description="When the exercise was first solved; defaults to now"
    )

    model_config = ConfigDict(extra="ignore")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    @field_validator("source", "source_id", "link", "tags", "answer", mode="before")
    @classmethod
    def none_to_empty(cls, value: Optional[str]) -> str:
        return "" if value is None else value


class ExerciseCreate(ExerciseFields):
    """Payload for creating an exercise."""


class ExerciseUpdate(ExerciseFields):
    """Payload for editing an exercise's descriptive fields."""


class ExerciseRead(BaseModel):
    """Representation of an exercise."""

    id: int
    source: str = ""
    source_id: str = ""
    title: str
    link: str = ""
    tags: str = ""
    answer: str = ""
    resolve_date: datetime
    next_review_date: datetime
    review_stage: int
    review_count: int
    last_reviewed_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("source", "source_id", "link", "tags", "answer", mode="before")
    @classmethod
    def none_to_empty(cls, value: Optional[str]) -> str:
        return "" if value is None else value

    @field_validator("review_count", mode="before")
    @classmethod
    def none_to_zero(cls, value: Optional[int]) -> int:
        return 0 if value is None else value


class ExerciseListResponse(BaseModel):
    """Paginated exercise list payload."""

    data: list[ExerciseRead]
    total: int
    page: int
    total_pages: int


class ExerciseCreated(BaseModel):
    id: int


class StatusResponse(BaseModel):
    status: str


class DashboardStats(BaseModel):
    """Counters shown on the dashboard cards."""

    pending_count: int
    total_count: int
    pool_count: int
    reviewed_today_count: int
    solved_today_count: int
