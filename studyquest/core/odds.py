"""Score estimates and multiplier/score conversion for wagers.

The two conversions are defined independently and are not exact inverses:
``multiplier_from_score`` models each 0.1x step as 10% compound growth over
the base score, while ``required_score_from_multiplier`` reads a per-tier
breakpoint table and interpolates linearly between breakpoints.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from studyquest.core.rounding import clamp, round_half_up

MIN_BASE_SCORE = 65
MAX_SCORE = 100
DEFAULT_CONFIDENCE = 0.5
MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.9
MIN_HISTORY = 3
INCONSISTENT_STDEV = 10
MULTIPLIER_STEP = 0.1
STEP_GROWTH = 1.1
MULTIPLIER_FROM_SCORE_CAP = 2.0


class Tier(str, Enum):
    """Account class that bounds multipliers and stake sizes."""

    FREE = "free"
    PREMIUM = "premium"

    @classmethod
    def from_plan(cls, plan: str | None) -> "Tier":
        return cls.PREMIUM if plan == cls.PREMIUM.value else cls.FREE


@dataclass(frozen=True)
class TierLimits:
    max_multiplier: float
    max_bet_percentage: float


# multiplier -> points added on top of the base score
FREE_BREAKPOINTS: tuple[tuple[float, int], ...] = (
    (1.0, 0),
    (1.1, 5),
    (1.2, 12),
    (1.3, 20),
    (1.4, 30),
    (1.5, 35),
)

PREMIUM_BREAKPOINTS: tuple[tuple[float, int], ...] = (
    (1.0, 0),
    (1.5, 4),
    (2.0, 9),
    (2.5, 14),
    (3.0, 20),
    (3.5, 25),
    (4.0, 30),
    (4.5, 33),
    (5.0, 35),
)

BREAKPOINTS = {Tier.FREE: FREE_BREAKPOINTS, Tier.PREMIUM: PREMIUM_BREAKPOINTS}


@dataclass
class ScoreEstimate:
    """Historical performance estimate used as the 1.0x reference point."""

    base_score: int
    confidence: float
    factors: list[str] = field(default_factory=list)


def default_estimate() -> ScoreEstimate:
    return ScoreEstimate(
        base_score=MIN_BASE_SCORE,
        confidence=DEFAULT_CONFIDENCE,
        factors=["No historical data available - using default base score"],
    )


def estimate_base_score(grades: Sequence[float]) -> ScoreEstimate:
    """Estimate the base score and confidence from past percent grades.

    The reported base score is floored at 65. An average that rounds to
    exactly 100 is also reported as 65.
    """

    if not grades:
        return default_estimate()

    count = len(grades)
    average = sum(grades) / count
    variance = sum((grade - average) ** 2 for grade in grades) / count
    stdev = math.sqrt(variance)
    confidence = clamp(1 - stdev / 20, MIN_CONFIDENCE, MAX_CONFIDENCE)

    factors: list[str] = []
    if count < MIN_HISTORY:
        factors.append("Limited historical data")
    if stdev > INCONSISTENT_STDEV:
        factors.append("Inconsistent performance")
    if average > 85:
        factors.append("Strong academic performance")
    if average < 70:
        factors.append("Below average performance")

    base_score = round_half_up(average)
    if base_score < MIN_BASE_SCORE:
        factors.append(f"Base score adjusted to {MIN_BASE_SCORE}% (was {base_score}%)")
        base_score = MIN_BASE_SCORE
    if base_score == MAX_SCORE:
        factors.append(f"Base score adjusted to {MIN_BASE_SCORE}% (was {MAX_SCORE}%)")
        base_score = MIN_BASE_SCORE

    return ScoreEstimate(
        base_score=base_score,
        confidence=round(confidence, 2),
        factors=factors,
    )


def multiplier_from_score(base_score: float, target_score: float) -> float:
    """Return the multiplier a target score is worth over ``base_score``.

    Each 0.1x increment compounds the required gain by 10%:
    ``gain / base = 1.1 ** increments - 1``.
    """

    if target_score <= base_score:
        return 1.0

    ratio = (target_score - base_score) / base_score
    increments = math.log(ratio + 1) / math.log(STEP_GROWTH)
    multiplier = 1.0 + increments * MULTIPLIER_STEP
    return min(MULTIPLIER_FROM_SCORE_CAP, round_half_up(multiplier * 10) / 10)


def required_score_from_multiplier(base_score: float, multiplier: float, tier: Tier = Tier.FREE) -> int:
    """Return the score needed to win a wager at ``multiplier``."""

    effective_base = max(MIN_BASE_SCORE, base_score)
    if multiplier <= 1.0:
        return round_half_up(effective_base)

    breakpoints = BREAKPOINTS[tier]
    for (prev_mult, prev_offset), (next_mult, next_offset) in zip(breakpoints, breakpoints[1:]):
        if multiplier <= next_mult:
            fraction = (multiplier - prev_mult) / (next_mult - prev_mult)
            score = effective_base + prev_offset + fraction * (next_offset - prev_offset)
            return min(MAX_SCORE, round_half_up(score))

    # past the table: the top offset, still capped
    return min(MAX_SCORE, round_half_up(effective_base + breakpoints[-1][1]))


__all__ = [
    "BREAKPOINTS",
    "FREE_BREAKPOINTS",
    "MIN_BASE_SCORE",
    "PREMIUM_BREAKPOINTS",
    "ScoreEstimate",
    "Tier",
    "TierLimits",
    "default_estimate",
    "estimate_base_score",
    "multiplier_from_score",
    "required_score_from_multiplier",
]
