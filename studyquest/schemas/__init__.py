"""Pydantic schemas package."""

from studyquest.schemas.achievement import (
    AchievementEvaluationResponse,
    AchievementProgressResponse,
)
from studyquest.schemas.activity import (
    ActivityRead,
    FixtureGrade,
    FixtureItemCreate,
    GradedItemRead,
    PreferencesUpdate,
)
from studyquest.schemas.auth import TokenPayload
from studyquest.schemas.odds import (
    ScoreEstimateResponse,
    TargetMultiplierResponse,
    TierLimitsResponse,
    WagerQuoteResponse,
)
from studyquest.schemas.points import LevelRead, PointsSummaryResponse
from studyquest.schemas.wager import (
    BettableItemRead,
    ResolveWagersResponse,
    WagerCreate,
    WagerRead,
    WagerResolutionRead,
    WagerStatsResponse,
)

__all__ = [
    "AchievementEvaluationResponse",
    "AchievementProgressResponse",
    "ActivityRead",
    "BettableItemRead",
    "FixtureGrade",
    "FixtureItemCreate",
    "GradedItemRead",
    "LevelRead",
    "PointsSummaryResponse",
    "PreferencesUpdate",
    "ResolveWagersResponse",
    "ScoreEstimateResponse",
    "TargetMultiplierResponse",
    "TierLimitsResponse",
    "TokenPayload",
    "WagerCreate",
    "WagerQuoteResponse",
    "WagerRead",
    "WagerResolutionRead",
    "WagerStatsResponse",
]
