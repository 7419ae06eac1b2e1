"""Achievement evaluation and progress tracking."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyquest.config import settings
from studyquest.core.achievements import (
    ACHIEVEMENT_CATALOG,
    AchievementDefinition,
    MetricsSnapshot,
    calculate_progress,
)
from studyquest.db.models.achievement import Achievement
from studyquest.services.metrics import MetricsCollector, MetricsSource
from studyquest.services.notifications import (
    AchievementUnlocked,
    LoggingUnlockNotifier,
    UnlockNotifier,
    dispatch_unlocks,
)
from studyquest.utils.cache import cache_backend

CACHE_NAMESPACE = "achievements:user"


@dataclass
class AchievementProgress:
    """Current progress toward an achievement."""

    achievement_id: int
    title: str
    description: str | None
    icon: str | None
    difficulty: str
    points: int
    progress: int
    unlocked: bool
    unlocked_at: datetime | None
    sticky: bool
    requirement: dict[str, Any]

    @property
    def earned_points(self) -> float:
        if self.unlocked:
            return float(self.points)
        return self.points * self.progress / 100


@dataclass
class EvaluationResult:
    """Outcome of one evaluation pass, by achievement title."""

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    newly_unlocked: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    metrics_empty: bool = False


class AchievementService:
    """Evaluate the achievement catalog against a user's metrics."""

    def __init__(
        self,
        db: Session,
        *,
        metrics_source: MetricsSource | None = None,
        notifier: UnlockNotifier | None = None,
        catalog: Sequence[AchievementDefinition] = ACHIEVEMENT_CATALOG,
    ) -> None:
        self.db = db
        self.metrics_source = metrics_source or MetricsCollector(db)
        self.notifier = notifier or LoggingUnlockNotifier()
        self.catalog = tuple(catalog)
        self._sticky_titles = {d.title for d in self.catalog if d.sticky}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_achievements(self, user_id: uuid.UUID) -> list[AchievementProgress]:
        """Return the user's achievement rows, ordered by catalog position."""

        cache_key = str(user_id)
        cached = cache_backend.get(CACHE_NAMESPACE, cache_key)
        if cached is not None:
            return [self._from_cache(item) for item in cached]

        rows = self.db.scalars(select(Achievement).where(Achievement.user_id == user_id)).all()
        order = {definition.title: index for index, definition in enumerate(self.catalog)}
        rows = sorted(rows, key=lambda row: (order.get(row.title, len(order)), row.id))
        items = [self._to_progress(row) for row in rows]

        cache_backend.set(
            CACHE_NAMESPACE,
            cache_key,
            [self._to_cache(item) for item in items],
            ttl_seconds=settings.ACHIEVEMENT_CACHE_TTL_SECONDS,
        )
        return items

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def evaluate(self, user_id: uuid.UUID, *, now: datetime | None = None) -> EvaluationResult:
        """Run one pass over the catalog for ``user_id``.

        Each rule is written and committed on its own; a store failure on one
        rule is rolled back and logged and the pass moves on.
        """

        now = now or datetime.now(timezone.utc)
        metrics = self.metrics_source.collect(user_id)
        result = EvaluationResult(metrics_empty=metrics.is_empty)
        if metrics.is_empty:
            logger.info("Evaluating achievements without metrics data", user_id=str(user_id))

        existing = {
            row.title: row
            for row in self.db.scalars(select(Achievement).where(Achievement.user_id == user_id)).all()
        }
        events: list[AchievementUnlocked] = []

        for definition in self.catalog:
            try:
                row = existing.get(definition.title)
                if row is None:
                    row = self._create(user_id, definition, metrics, now)
                    self.db.commit()
                    result.created.append(definition.title)
                    just_unlocked = row.unlocked
                elif metrics.is_empty or (definition.sticky and row.unlocked):
                    # an empty snapshot next to existing rows means the metrics read failed
                    result.skipped.append(definition.title)
                    continue
                else:
                    was_unlocked = row.unlocked
                    if self._apply(row, definition, metrics, now):
                        self.db.commit()
                        result.updated.append(definition.title)
                    just_unlocked = row.unlocked and not was_unlocked
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.error(
                    "Achievement update failed",
                    user_id=str(user_id),
                    title=definition.title,
                    error=str(exc),
                )
                result.failed.append(definition.title)
                continue

            if just_unlocked:
                result.newly_unlocked.append(definition.title)
                events.append(
                    AchievementUnlocked(
                        user_id=user_id,
                        achievement_id=row.id,
                        title=row.title,
                        description=row.description,
                        points=row.points,
                        unlocked_at=row.unlocked_at or now,
                    )
                )

        cache_backend.invalidate(CACHE_NAMESPACE, str(user_id))
        dispatch_unlocks(self.notifier, events)

        logger.info(
            "Achievement evaluation completed",
            user_id=str(user_id),
            created=len(result.created),
            updated=len(result.updated),
            unlocked=len(result.newly_unlocked),
            failed=len(result.failed),
        )
        return result

    def _create(
        self,
        user_id: uuid.UUID,
        definition: AchievementDefinition,
        metrics: MetricsSnapshot,
        now: datetime,
    ) -> Achievement:
        # initialise from current metrics so an already-satisfied rule starts at 100
        progress, unlocked = calculate_progress(definition.rule, metrics)
        row = Achievement(
            user_id=user_id,
            title=definition.title,
            description=definition.description,
            icon=definition.icon,
            difficulty=definition.difficulty.value,
            points=definition.points,
            requirement=definition.rule.to_dict(),
            progress=progress,
            unlocked=unlocked,
            unlocked_at=now if unlocked else None,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def _apply(
        self,
        row: Achievement,
        definition: AchievementDefinition,
        metrics: MetricsSnapshot,
        now: datetime,
    ) -> bool:
        """Bring ``row`` in line with ``definition``; return whether it changed."""

        progress, unlocked = calculate_progress(definition.rule, metrics)
        changed = False

        if row.progress != progress or row.unlocked != unlocked:
            if unlocked and not row.unlocked:
                row.unlocked_at = now
            elif not unlocked:
                row.unlocked_at = None
            row.progress = progress
            row.unlocked = unlocked
            changed = True

        if row.points != definition.points:
            row.points = definition.points
            changed = True

        requirement = definition.rule.to_dict()
        if row.requirement != requirement:
            row.requirement = requirement
            changed = True

        return changed

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def _to_progress(self, row: Achievement) -> AchievementProgress:
        return AchievementProgress(
            achievement_id=row.id,
            title=row.title,
            description=row.description,
            icon=row.icon,
            difficulty=row.difficulty,
            points=row.points,
            progress=row.progress,
            unlocked=row.unlocked,
            unlocked_at=row.unlocked_at,
            sticky=row.title in self._sticky_titles,
            requirement=dict(row.requirement or {}),
        )

    @staticmethod
    def _to_cache(item: AchievementProgress) -> dict[str, Any]:
        return {
            "achievement_id": item.achievement_id,
            "title": item.title,
            "description": item.description,
            "icon": item.icon,
            "difficulty": item.difficulty,
            "points": item.points,
            "progress": item.progress,
            "unlocked": item.unlocked,
            "unlocked_at": item.unlocked_at.isoformat() if item.unlocked_at else None,
            "sticky": item.sticky,
            "requirement": item.requirement,
        }

    @staticmethod
    def _from_cache(item: dict[str, Any]) -> AchievementProgress:
        unlocked_at = datetime.fromisoformat(item["unlocked_at"]) if item["unlocked_at"] else None
        return AchievementProgress(
            achievement_id=item["achievement_id"],
            title=item["title"],
            description=item["description"],
            icon=item["icon"],
            difficulty=item["difficulty"],
            points=item["points"],
            progress=item["progress"],
            unlocked=item["unlocked"],
            unlocked_at=unlocked_at,
            sticky=item["sticky"],
            requirement=item["requirement"],
        )


__all__ = [
    "AchievementProgress",
    "AchievementService",
    "EvaluationResult",
]
