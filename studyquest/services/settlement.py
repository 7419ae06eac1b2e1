"""Settlement of wagers once their graded item carries a real grade."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from studyquest.config import settings
from studyquest.db.models.course import Course, DEFAULT_POINTS_POSSIBLE, GradedItem
from studyquest.db.models.wager import Wager
from studyquest.utils.exceptions import DataStoreError, ItemNotFound

FIXTURE_DUE_IN = timedelta(days=7)


@dataclass
class WagerResolution:
    wager_id: uuid.UUID
    item_id: uuid.UUID
    amount: float
    multiplier: float
    required_score: int
    actual_score: int
    won: bool
    points_awarded: float


def settle_outcome(amount: float, multiplier: float, required_score: int, actual_score: int) -> tuple[bool, float]:
    """Return ``(won, points_awarded)`` for a graded wager."""

    won = actual_score >= required_score
    return won, (amount * multiplier if won else 0.0)


class SettlementService:
    """Resolve a user's unresolved wagers exactly once."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def resolve_pending_wagers(
        self, user_id: uuid.UUID, *, now: datetime | None = None
    ) -> list[WagerResolution]:
        """Settle every unresolved wager whose item now has a real grade.

        Wagers on items that are still ungraded stay pending. A wager another
        caller settled first is skipped and not reported.
        """

        now = now or datetime.now(timezone.utc)
        try:
            pending = self.db.execute(
                select(Wager, GradedItem)
                .join(GradedItem, Wager.item_id == GradedItem.id)
                .where(Wager.user_id == user_id, Wager.resolved.is_(False))
                .order_by(Wager.created_at)
            ).all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DataStoreError("Could not load pending wagers", {"error": str(exc)}) from exc

        resolutions: list[WagerResolution] = []
        for wager, item in pending:
            if not item.has_real_grade:
                continue
            try:
                resolution = self._settle(wager, item, now)
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.error(
                    "Wager settlement failed",
                    user_id=str(user_id),
                    wager_id=str(wager.id),
                    error=str(exc),
                )
                continue
            if resolution is not None:
                resolutions.append(resolution)

        if resolutions:
            logger.info(
                f"Resolved {len(resolutions)} wagers",
                user_id=str(user_id),
                won=sum(1 for r in resolutions if r.won),
            )
        return resolutions

    def resolve_wager(
        self, wager_id: uuid.UUID, *, now: datetime | None = None
    ) -> WagerResolution | None:
        """Settle a single wager; ``None`` when it is settled already or still ungraded."""

        now = now or datetime.now(timezone.utc)
        try:
            row = self.db.execute(
                select(Wager, GradedItem)
                .join(GradedItem, Wager.item_id == GradedItem.id)
                .where(Wager.id == wager_id)
            ).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DataStoreError("Could not load wager", {"error": str(exc)}) from exc

        if row is None:
            return None
        wager, item = row
        if wager.resolved or not item.has_real_grade:
            return None
        try:
            return self._settle(wager, item, now)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DataStoreError("Could not settle wager", {"error": str(exc)}) from exc

    def _settle(self, wager: Wager, item: GradedItem, now: datetime) -> WagerResolution | None:
        actual = item.percent_score
        won, points_awarded = settle_outcome(wager.amount, wager.multiplier, wager.required_score, actual)

        result = self.db.execute(
            update(Wager)
            .where(Wager.id == wager.id, Wager.resolved.is_(False))
            .values(
                resolved=True,
                won=won,
                points_awarded=points_awarded,
                actual_score=actual,
                resolved_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            logger.info("Wager already resolved", wager_id=str(wager.id))
            return None
        self.db.commit()
        for key, value in (
            ("resolved", True),
            ("won", won),
            ("points_awarded", points_awarded),
            ("actual_score", actual),
            ("resolved_at", now),
        ):
            set_committed_value(wager, key, value)

        logger.info(
            "Wager resolved",
            user_id=str(wager.user_id),
            wager_id=str(wager.id),
            actual_score=actual,
            required_score=wager.required_score,
            won=won,
            points_awarded=points_awarded,
        )
        return WagerResolution(
            wager_id=wager.id,
            item_id=item.id,
            amount=wager.amount,
            multiplier=wager.multiplier,
            required_score=wager.required_score,
            actual_score=actual,
            won=won,
            points_awarded=points_awarded,
        )

    # ------------------------------------------------------------------
    # Fixture items
    # ------------------------------------------------------------------
    def create_fixture_item(
        self, user_id: uuid.UUID, course_id: uuid.UUID, *, now: datetime | None = None
    ) -> GradedItem:
        """Create the designated test item in one of the user's courses."""

        now = now or datetime.now(timezone.utc)
        course = self.db.get(Course, course_id)
        if course is None or course.user_id != user_id:
            raise ItemNotFound("Course not found", {"course_id": str(course_id)})

        item = GradedItem(
            user_id=user_id,
            course_id=course_id,
            title=settings.FIXTURE_ITEM_TITLE,
            item_type="assignment",
            status="upcoming",
            due_date=now + FIXTURE_DUE_IN,
            points_possible=DEFAULT_POINTS_POSSIBLE,
            grade=None,
        )
        try:
            self.db.add(item)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DataStoreError("Could not create fixture item", {"error": str(exc)}) from exc
        self.db.refresh(item)
        logger.info("Fixture item created", user_id=str(user_id), item_id=str(item.id))
        return item

    def grade_fixture_item(
        self,
        item_id: uuid.UUID,
        grade: float,
        *,
        user_id: uuid.UUID | None = None,
        now: datetime | None = None,
    ) -> GradedItem:
        """Mark the fixture item completed with a raw score out of its points possible."""

        now = now or datetime.now(timezone.utc)
        item = self.db.get(GradedItem, item_id)
        if item is None or item.title != settings.FIXTURE_ITEM_TITLE or (
            user_id is not None and item.user_id != user_id
        ):
            raise ItemNotFound("Fixture item not found", {"item_id": str(item_id)})

        item.status = "completed"
        item.grade = grade
        item.completed_at = now
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DataStoreError("Could not grade fixture item", {"error": str(exc)}) from exc
        self.db.refresh(item)
        return item


__all__ = ["SettlementService", "WagerResolution", "settle_outcome"]
