"""Achievement API endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from studyquest.api import deps
from studyquest.db.models.user import User
from studyquest.schemas.achievement import (
    AchievementEvaluationResponse,
    AchievementProgressResponse,
)
from studyquest.services.achievement import AchievementProgress, AchievementService

router = APIRouter(prefix="/achievements", tags=["achievements"])


def _to_response(item: AchievementProgress) -> AchievementProgressResponse:
    return AchievementProgressResponse(
        achievement_id=item.achievement_id,
        title=item.title,
        description=item.description,
        icon=item.icon,
        difficulty=item.difficulty,
        points=item.points,
        progress=item.progress,
        unlocked=item.unlocked,
        unlocked_at=item.unlocked_at,
        sticky=item.sticky,
        earned_points=item.earned_points,
        requirement=item.requirement,
    )


@router.get("", response_model=list[AchievementProgressResponse])
def get_my_achievements(
    *,
    service: AchievementService = Depends(deps.get_achievement_service),
    current_user: User = Depends(deps.get_current_user),
) -> list[AchievementProgressResponse]:
    """Return the authenticated user's achievement progress."""

    return [_to_response(item) for item in service.get_achievements(current_user.id)]


@router.post("/evaluate", response_model=AchievementEvaluationResponse)
def evaluate_achievements(
    *,
    service: AchievementService = Depends(deps.get_achievement_service),
    current_user: User = Depends(deps.get_current_user),
) -> AchievementEvaluationResponse:
    """Re-evaluate every achievement rule for the authenticated user."""

    result = service.evaluate(current_user.id)
    return AchievementEvaluationResponse(
        created=result.created,
        updated=result.updated,
        newly_unlocked=result.newly_unlocked,
        failed=result.failed,
        metrics_empty=result.metrics_empty,
    )
