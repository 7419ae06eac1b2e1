"""Level progression derived from total points."""
from __future__ import annotations

import math
from dataclasses import dataclass

LEVEL_THRESHOLDS: tuple[int, ...] = (0, 5, 15, 30, 50, 75, 110, 150, 200, 275)
MAX_LEVEL = len(LEVEL_THRESHOLDS)


@dataclass(frozen=True)
class LevelProgress:
    """Position of a point total within the level table."""

    level: int
    current_threshold: int
    next_threshold: int
    progress: int


def calculate_level(total_points: float) -> int:
    """Return the 1-based level reached with ``total_points``."""

    for index in range(MAX_LEVEL - 1, -1, -1):
        if total_points >= LEVEL_THRESHOLDS[index]:
            return index + 1
    return 1


def calculate_level_progress(total_points: float) -> LevelProgress:
    """Return the thresholds around ``total_points`` and percent progress between them."""

    level = calculate_level(total_points)
    current = LEVEL_THRESHOLDS[level - 1]
    if level == MAX_LEVEL:
        return LevelProgress(level=level, current_threshold=current, next_threshold=current, progress=100)

    nxt = LEVEL_THRESHOLDS[level]
    gained = total_points - current
    progress = min(100, math.floor(gained / (nxt - current) * 100))
    return LevelProgress(level=level, current_threshold=current, next_threshold=nxt, progress=progress)


def points_to_next_level(total_points: float) -> float:
    """Return how many points are still missing for the next level (0 at the top)."""

    level = calculate_level(total_points)
    if level == MAX_LEVEL:
        return 0
    return LEVEL_THRESHOLDS[level] - total_points
