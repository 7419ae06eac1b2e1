"""Shared API dependencies."""
from __future__ import annotations

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from studyquest.config import settings
from studyquest.core.security import InvalidTokenError, decode_token
from studyquest.db.models.user import User
from studyquest.db.session import get_db
from studyquest.schemas import TokenPayload
from studyquest.services.achievement import AchievementService
from studyquest.services.notifications import CeleryUnlockNotifier, LoggingUnlockNotifier

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated user from the Authorization header."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        raise credentials_exception

    try:
        payload = decode_token(credentials.credentials)
        if payload.get("type") != "access":
            raise InvalidTokenError("Token must be an access token")
        token_data = TokenPayload.model_validate(payload)
    except (InvalidTokenError, ValidationError, ValueError, KeyError) as exc:
        raise credentials_exception from exc

    user_id = uuid.UUID(str(token_data.sub))
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise credentials_exception
    return user


def get_achievement_service(db: Session = Depends(get_db)) -> AchievementService:
    """Assemble the achievement service; unlocks go to Celery when a broker is set."""

    notifier = CeleryUnlockNotifier() if settings.CELERY_BROKER_URL else LoggingUnlockNotifier()
    return AchievementService(db, notifier=notifier)


def require_fixture_items() -> None:
    """Hide the fixture endpoints unless they are switched on."""

    if not settings.ENABLE_FIXTURE_ITEMS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


__all__ = [
    "get_achievement_service",
    "get_current_user",
    "get_db",
    "require_fixture_items",
]
