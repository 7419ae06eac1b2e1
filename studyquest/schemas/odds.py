"""Pydantic schemas for odds endpoints."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ScoreEstimateResponse(BaseModel):
    base_score: int
    confidence: float = Field(ge=0, le=1)
    factors: list[str] = Field(default_factory=list)


class TierLimitsResponse(BaseModel):
    tier: str
    max_multiplier: float
    max_bet_percentage: float


class WagerQuoteResponse(BaseModel):
    """Required score for a multiplier at the current estimate."""

    estimate: ScoreEstimateResponse
    tier: str
    multiplier: float
    required_score: int


class TargetMultiplierResponse(BaseModel):
    estimate: ScoreEstimateResponse
    target_score: float
    multiplier: float


__all__ = [
    "ScoreEstimateResponse",
    "TargetMultiplierResponse",
    "TierLimitsResponse",
    "WagerQuoteResponse",
]
