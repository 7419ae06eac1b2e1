"""Service layer for the user activity flags that feed achievements."""
from __future__ import annotations

import uuid

from loguru import logger
from sqlalchemy import update
from sqlalchemy.orm import Session

from studyquest.db.models.user import User

THEMES = ("dark", "light")


class UserNotFoundError(ValueError):
    """Raised when a user lookup fails."""


class ActivityService:
    """Record LMS syncs and profile preferences."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: uuid.UUID) -> User:
        """Return a user by identifier or raise ``UserNotFoundError``."""

        user = self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError("User not found")
        return user

    def record_lms_sync(self, user: User) -> User:
        """Count one completed LMS synchronisation."""

        self.db.execute(
            update(User)
            .where(User.id == user.id)
            .values(lms_sync_count=User.lms_sync_count + 1)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.refresh(user)
        logger.info("LMS sync recorded", user_id=str(user.id), count=user.lms_sync_count)
        return user

    def set_profile_picture(self, user: User, present: bool) -> User:
        user.has_profile_picture = present
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_theme(self, user: User, theme: str) -> User:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        user.prefers_dark_mode = theme == "dark"
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
