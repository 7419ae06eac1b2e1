"""Odds lookups backed by the user's grade history."""
from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from studyquest.config import settings
from studyquest.core.odds import (
    ScoreEstimate,
    Tier,
    TierLimits,
    estimate_base_score,
    multiplier_from_score,
    required_score_from_multiplier,
)
from studyquest.db.models.course import GradedItem
from studyquest.db.models.user import User


@dataclass
class WagerQuote:
    """Estimate plus the score a given multiplier would require."""

    estimate: ScoreEstimate
    tier: Tier
    multiplier: float
    required_score: int


@dataclass
class TargetQuote:
    estimate: ScoreEstimate
    target_score: float
    multiplier: float


def tier_limits(tier: Tier) -> TierLimits:
    if tier is Tier.PREMIUM:
        return TierLimits(
            max_multiplier=settings.PREMIUM_MAX_MULTIPLIER,
            max_bet_percentage=settings.PREMIUM_MAX_BET_PERCENTAGE,
        )
    return TierLimits(
        max_multiplier=settings.FREE_MAX_MULTIPLIER,
        max_bet_percentage=settings.FREE_MAX_BET_PERCENTAGE,
    )


class OddsService:
    """Score estimates, tier limits and quotes for one user."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_tier(self, user_id: uuid.UUID) -> Tier:
        plan = self.db.scalar(select(User.plan).where(User.id == user_id))
        return Tier.from_plan(plan)

    def get_limits(self, user_id: uuid.UUID) -> TierLimits:
        return tier_limits(self.get_tier(user_id))

    def historical_grades(
        self,
        user_id: uuid.UUID,
        course_id: uuid.UUID | None = None,
        *,
        exclude_item_id: uuid.UUID | None = None,
    ) -> list[int]:
        """Percent scores of the user's graded items in scope.

        Scope is one course when ``course_id`` is given, otherwise every course.
        """

        stmt = select(GradedItem).where(
            GradedItem.user_id == user_id,
            GradedItem.grade.is_not(None),
        )
        if course_id is not None:
            stmt = stmt.where(GradedItem.course_id == course_id)
        if exclude_item_id is not None:
            stmt = stmt.where(GradedItem.id != exclude_item_id)

        items = self.db.scalars(stmt.order_by(GradedItem.due_date)).all()
        return [item.percent_score for item in items if item.has_real_grade]

    def get_score_estimate(
        self,
        user_id: uuid.UUID,
        course_id: uuid.UUID | None = None,
        *,
        exclude_item_id: uuid.UUID | None = None,
    ) -> ScoreEstimate:
        grades = self.historical_grades(user_id, course_id, exclude_item_id=exclude_item_id)
        return estimate_base_score(grades)

    def quote(
        self,
        user_id: uuid.UUID,
        multiplier: float,
        course_id: uuid.UUID | None = None,
    ) -> WagerQuote:
        estimate = self.get_score_estimate(user_id, course_id)
        tier = self.get_tier(user_id)
        return WagerQuote(
            estimate=estimate,
            tier=tier,
            multiplier=multiplier,
            required_score=required_score_from_multiplier(estimate.base_score, multiplier, tier),
        )

    def multiplier_for_target(
        self,
        user_id: uuid.UUID,
        target_score: float,
        course_id: uuid.UUID | None = None,
    ) -> TargetQuote:
        """Return the multiplier that aiming for ``target_score`` is worth."""

        estimate = self.get_score_estimate(user_id, course_id)
        return TargetQuote(
            estimate=estimate,
            target_score=target_score,
            multiplier=multiplier_from_score(estimate.base_score, target_score),
        )


__all__ = ["OddsService", "TargetQuote", "WagerQuote", "tier_limits"]
