"""Unlock notifications, decoupled from achievement writes."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Protocol

from loguru import logger


@dataclass(frozen=True)
class AchievementUnlocked:
    """Emitted once an achievement's transition to 100% has been committed."""

    user_id: uuid.UUID
    achievement_id: int
    title: str
    description: str | None
    points: int
    unlocked_at: datetime


class UnlockNotifier(Protocol):
    def __call__(self, event: AchievementUnlocked) -> None:
        ...


class LoggingUnlockNotifier:
    """Default sink: write the unlock to the application log."""

    def __call__(self, event: AchievementUnlocked) -> None:
        logger.info(
            "Achievement unlocked",
            user_id=str(event.user_id),
            title=event.title,
            points=event.points,
        )


class CeleryUnlockNotifier:
    """Hand the unlock to a Celery worker so delivery happens off-request."""

    def __call__(self, event: AchievementUnlocked) -> None:
        from studyquest.tasks.notifications import announce_achievement_unlock

        announce_achievement_unlock.delay(
            str(event.user_id), event.title, event.description, event.points
        )


def dispatch_unlocks(notifier: UnlockNotifier, events: Iterable[AchievementUnlocked]) -> int:
    """Deliver each event, logging failures instead of raising.

    Returns the number of events the notifier accepted.
    """

    delivered = 0
    for event in events:
        try:
            notifier(event)
        except Exception as exc:  # noqa: BLE001 - notifications are fire-and-forget
            logger.error(
                "Unlock notification failed",
                user_id=str(event.user_id),
                title=event.title,
                error=str(exc),
            )
            continue
        delivered += 1
    return delivered


__all__ = [
    "AchievementUnlocked",
    "CeleryUnlockNotifier",
    "LoggingUnlockNotifier",
    "UnlockNotifier",
    "dispatch_unlocks",
]
