"""Celery tasks for wager settlement."""
from __future__ import annotations

from uuid import UUID

from loguru import logger

from studyquest.celery_app import celery_app
from studyquest.db.models.user import User
from studyquest.db.session import SessionLocal
from studyquest.services.settlement import SettlementService


@celery_app.task(name="studyquest.tasks.wagers.resolve_user_wagers")
def resolve_user_wagers(user_id: str) -> dict[str, int | float | str]:
    """Settle a user's pending wagers, typically right after an LMS sync."""

    db = SessionLocal()
    try:
        try:
            user_uuid = UUID(user_id)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid user ID: {user_id}") from exc

        user = db.get(User, user_uuid)
        if not user:
            raise ValueError(f"User {user_id} not found")

        resolutions = SettlementService(db).resolve_pending_wagers(user.id)
        won = [r for r in resolutions if r.won]

        return {
            "user_id": user_id,
            "resolved": len(resolutions),
            "won": len(won),
            "points_awarded": sum(r.points_awarded for r in won),
        }

    except Exception as exc:
        logger.error("Wager settlement task failed", user_id=user_id, error=str(exc))
        raise
    finally:
        db.close()
