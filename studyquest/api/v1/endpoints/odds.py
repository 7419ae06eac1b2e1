"""Odds endpoints: score estimates, quotes and tier limits."""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studyquest.api import deps
from studyquest.core.odds import ScoreEstimate
from studyquest.db.models.user import User
from studyquest.schemas.odds import (
    ScoreEstimateResponse,
    TargetMultiplierResponse,
    TierLimitsResponse,
    WagerQuoteResponse,
)
from studyquest.services.odds import OddsService

router = APIRouter(prefix="/odds", tags=["odds"])


def _estimate_response(estimate: ScoreEstimate) -> ScoreEstimateResponse:
    return ScoreEstimateResponse(
        base_score=estimate.base_score,
        confidence=estimate.confidence,
        factors=list(estimate.factors),
    )


@router.get("/estimate", response_model=ScoreEstimateResponse)
def read_estimate(
    course_id: Optional[uuid.UUID] = Query(None, description="Limit history to one course"),
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> ScoreEstimateResponse:
    """Estimate the user's expected score from past grades."""

    estimate = OddsService(db).get_score_estimate(current_user.id, course_id)
    return _estimate_response(estimate)


@router.get("/quote", response_model=WagerQuoteResponse)
def read_quote(
    multiplier: float = Query(..., ge=1.0),
    course_id: Optional[uuid.UUID] = Query(None),
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> WagerQuoteResponse:
    """Return the score a multiplier would require right now."""

    quote = OddsService(db).quote(current_user.id, multiplier, course_id)
    return WagerQuoteResponse(
        estimate=_estimate_response(quote.estimate),
        tier=quote.tier.value,
        multiplier=quote.multiplier,
        required_score=quote.required_score,
    )


@router.get("/multiplier", response_model=TargetMultiplierResponse)
def read_target_multiplier(
    target_score: float = Query(..., ge=0, le=100),
    course_id: Optional[uuid.UUID] = Query(None),
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> TargetMultiplierResponse:
    """Return the multiplier a target score is worth over the current estimate."""

    quote = OddsService(db).multiplier_for_target(current_user.id, target_score, course_id)
    return TargetMultiplierResponse(
        estimate=_estimate_response(quote.estimate),
        target_score=quote.target_score,
        multiplier=quote.multiplier,
    )


@router.get("/limits", response_model=TierLimitsResponse)
def read_limits(
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> TierLimitsResponse:
    service = OddsService(db)
    tier = service.get_tier(current_user.id)
    limits = service.get_limits(current_user.id)
    return TierLimitsResponse(
        tier=tier.value,
        max_multiplier=limits.max_multiplier,
        max_bet_percentage=limits.max_bet_percentage,
    )
