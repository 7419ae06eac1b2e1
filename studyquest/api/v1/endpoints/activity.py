"""Activity endpoints that feed the achievement metrics."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studyquest.api import deps
from studyquest.config import settings
from studyquest.db.models.user import User
from studyquest.schemas.activity import ActivityRead, PreferencesUpdate
from studyquest.services.activity import ActivityService

router = APIRouter(prefix="/activity", tags=["activity"])


@router.post("/lms-sync", response_model=ActivityRead)
def record_lms_sync(
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> ActivityRead:
    """Record a completed LMS synchronisation for the authenticated user."""

    user = ActivityService(db).record_lms_sync(current_user)
    if settings.CELERY_BROKER_URL:
        from studyquest.tasks.achievements import evaluate_user_achievements
        from studyquest.tasks.wagers import resolve_user_wagers

        resolve_user_wagers.delay(str(user.id))
        evaluate_user_achievements.delay(str(user.id))
    return ActivityRead.model_validate(user)


@router.put("/preferences", response_model=ActivityRead)
def update_preferences(
    payload: PreferencesUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> ActivityRead:
    service = ActivityService(db)
    user = current_user
    if payload.theme is not None:
        user = service.set_theme(user, payload.theme)
    if payload.has_profile_picture is not None:
        user = service.set_profile_picture(user, payload.has_profile_picture)
    return ActivityRead.model_validate(user)
