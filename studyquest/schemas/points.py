"""Pydantic schemas for the points summary."""
from __future__ import annotations

from pydantic import BaseModel


class LevelRead(BaseModel):
    level: int
    current_threshold: int
    next_threshold: int
    progress: int


class PointsSummaryResponse(BaseModel):
    """Totals derived from achievements and wagers."""

    achievement_points: float
    settled_wager_net: float
    total_points: float
    staked_points: float
    spendable_points: float
    level: LevelRead
    points_to_next_level: float


__all__ = ["LevelRead", "PointsSummaryResponse"]
