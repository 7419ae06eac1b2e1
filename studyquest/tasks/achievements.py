"""Celery tasks for achievement processing."""
from __future__ import annotations

from uuid import UUID

from loguru import logger

from studyquest.celery_app import celery_app
from studyquest.db.models.user import User
from studyquest.db.session import SessionLocal
from studyquest.services.achievement import AchievementService
from studyquest.services.notifications import CeleryUnlockNotifier


@celery_app.task(name="studyquest.tasks.achievements.evaluate_user_achievements")
def evaluate_user_achievements(user_id: str) -> dict[str, int | list[str] | str]:
    """Evaluate every achievement rule for a specific user."""

    db = SessionLocal()
    try:
        try:
            user_uuid = UUID(user_id)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid user ID: {user_id}") from exc

        user = db.get(User, user_uuid)
        if not user:
            raise ValueError(f"User {user_id} not found")

        service = AchievementService(db, notifier=CeleryUnlockNotifier())
        result = service.evaluate(user.id)

        return {
            "user_id": user_id,
            "created": len(result.created),
            "updated": len(result.updated),
            "newly_unlocked": result.newly_unlocked,
            "failed": result.failed,
        }

    except Exception as exc:
        logger.error("Achievement evaluation task failed", user_id=user_id, error=str(exc))
        raise
    finally:
        db.close()
