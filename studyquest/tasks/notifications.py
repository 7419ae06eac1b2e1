"""Celery tasks for user notifications."""
from __future__ import annotations

from uuid import UUID

from loguru import logger

from studyquest.celery_app import celery_app
from studyquest.db.models.user import User
from studyquest.db.session import SessionLocal


@celery_app.task(name="studyquest.tasks.notifications.announce_achievement_unlock")
def announce_achievement_unlock(
    user_id: str, title: str, description: str | None, points: int
) -> dict[str, str | int | bool]:
    """Announce an unlocked achievement to its owner."""

    db = SessionLocal()
    try:
        user = db.get(User, UUID(user_id))
        if not user or not user.is_active:
            logger.info("Skipping unlock announcement", user_id=user_id, title=title)
            return {"user_id": user_id, "title": title, "delivered": False}

        logger.info(
            f"Achievement unlocked: {title}",
            user_id=user_id,
            email=user.email,
            description=description,
            points=points,
        )
        return {"user_id": user_id, "title": title, "points": points, "delivered": True}
    finally:
        db.close()
