"""Tests for score estimates and multiplier conversions."""
from __future__ import annotations

import pytest

from studyquest.core.odds import (
    Tier,
    estimate_base_score,
    multiplier_from_score,
    required_score_from_multiplier,
)
from studyquest.core.rounding import round_half_up


def test_estimate_without_history_uses_default() -> None:
    estimate = estimate_base_score([])

    assert estimate.base_score == 65
    assert estimate.confidence == 0.5
    assert estimate.factors == ["No historical data available - using default base score"]


def test_perfect_history_is_reported_as_floor() -> None:
    estimate = estimate_base_score([100, 100, 100])

    assert estimate.base_score == 65
    assert estimate.confidence == 0.9
    assert "Base score adjusted to 65% (was 100%)" in estimate.factors
    assert "Strong academic performance" in estimate.factors


def test_low_history_is_floored_at_65() -> None:
    estimate = estimate_base_score([50, 60])

    assert estimate.base_score == 65
    assert "Limited historical data" in estimate.factors
    assert "Below average performance" in estimate.factors
    assert "Base score adjusted to 65% (was 55%)" in estimate.factors


def test_strong_consistent_history() -> None:
    estimate = estimate_base_score([88, 90, 92])

    assert estimate.base_score == 90
    assert estimate.confidence == 0.9
    assert estimate.factors == ["Strong academic performance"]


def test_inconsistent_history_lowers_confidence_to_minimum() -> None:
    estimate = estimate_base_score([60, 100, 80])

    assert estimate.base_score == 80
    assert estimate.confidence == 0.3
    assert "Inconsistent performance" in estimate.factors


@pytest.mark.parametrize("grades", [[40], [70, 71, 72], [99.6, 99.4, 99.5], [10, 100]])
def test_base_score_never_below_floor(grades: list[float]) -> None:
    assert estimate_base_score(grades).base_score >= 65


def test_free_max_multiplier_at_floor_requires_perfect_score() -> None:
    assert required_score_from_multiplier(65, 1.5, Tier.FREE) == 100


def test_premium_three_times_at_floor_requires_85() -> None:
    assert required_score_from_multiplier(65, 3.0, Tier.PREMIUM) == 85


def test_unit_multiplier_returns_base() -> None:
    assert required_score_from_multiplier(82, 1.0, Tier.FREE) == 82
    assert required_score_from_multiplier(50, 1.0, Tier.FREE) == 65


def test_required_score_interpolates_between_breakpoints() -> None:
    # halfway between +12 at 1.2x and +20 at 1.3x
    assert required_score_from_multiplier(70, 1.25, Tier.FREE) == 86


def test_required_score_is_capped_at_100() -> None:
    assert required_score_from_multiplier(90, 1.5, Tier.FREE) == 100
    assert required_score_from_multiplier(65, 6.0, Tier.PREMIUM) == 100


def test_required_score_increases_with_multiplier() -> None:
    scores = [required_score_from_multiplier(65, m / 10, Tier.PREMIUM) for m in range(10, 51, 5)]
    assert scores == sorted(scores)


def test_multiplier_from_score_at_base_is_one() -> None:
    assert multiplier_from_score(65, 65) == 1.0
    assert multiplier_from_score(80, 70) == 1.0


def test_multiplier_from_score_compounds_and_caps() -> None:
    assert multiplier_from_score(65, 100) == 1.5
    assert multiplier_from_score(30, 100) == 2.0


def test_tier_from_plan() -> None:
    assert Tier.from_plan("premium") is Tier.PREMIUM
    assert Tier.from_plan("free") is Tier.FREE
    assert Tier.from_plan(None) is Tier.FREE


def test_round_half_up_rounds_halves_upward() -> None:
    assert round_half_up(84.5) == 85
    assert round_half_up(85.5) == 86
    assert round_half_up(84.49) == 84
