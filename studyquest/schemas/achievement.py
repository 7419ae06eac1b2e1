"""Pydantic schemas for achievement endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AchievementProgressResponse(BaseModel):
    """User achievement progress schema."""

    achievement_id: int
    title: str
    description: str | None = None
    icon: str | None = None
    difficulty: str
    points: int
    progress: int = Field(ge=0, le=100)
    unlocked: bool
    unlocked_at: datetime | None = None
    sticky: bool = False
    earned_points: float
    requirement: dict[str, Any] = Field(default_factory=dict)


class AchievementEvaluationResponse(BaseModel):
    """Response after an evaluation pass."""

    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    newly_unlocked: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    metrics_empty: bool = False


__all__ = [
    "AchievementEvaluationResponse",
    "AchievementProgressResponse",
]
