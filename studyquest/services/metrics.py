"""Collect the activity metrics achievements are evaluated against."""
from __future__ import annotations

import uuid
from typing import Protocol

from loguru import logger
from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyquest.core.achievements import COURSE_GRADE_THRESHOLDS, MetricsSnapshot
from studyquest.db.models.achievement import Achievement
from studyquest.db.models.course import Course, GradedItem
from studyquest.db.models.user import User


class MetricsSource(Protocol):
    """Anything that can produce a metrics snapshot for a user."""

    def collect(self, user_id: uuid.UUID) -> MetricsSnapshot:
        ...


class MetricsCollector:
    """Read-only aggregation of a user's persisted activity."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def collect(self, user_id: uuid.UUID) -> MetricsSnapshot:
        """Return the user's metrics, or an empty snapshot if the store fails.

        Achievement display favours availability: a read error yields
        ``MetricsSnapshot.empty()`` instead of raising.
        """

        try:
            return self._collect(user_id)
        except SQLAlchemyError as exc:
            logger.warning("Metrics collection failed, using empty snapshot", user_id=str(user_id), error=str(exc))
            self.db.rollback()
            return MetricsSnapshot.empty()

    def _collect(self, user_id: uuid.UUID) -> MetricsSnapshot:
        completed_count = self.db.scalar(
            select(func.count(GradedItem.id)).where(
                GradedItem.user_id == user_id,
                GradedItem.status == "completed",
            )
        )

        graded_items = self.db.scalars(
            select(GradedItem).where(
                GradedItem.user_id == user_id,
                GradedItem.grade.is_not(None),
            )
        ).all()
        perfect_count = sum(1 for item in graded_items if item.percent_score == 100)

        course_grades = self.db.scalars(
            select(Course.grade).where(Course.user_id == user_id, Course.grade.is_not(None))
        ).all()
        grades_above = {
            threshold: sum(1 for grade in course_grades if grade >= threshold)
            for threshold in COURSE_GRADE_THRESHOLDS
        }

        user = self.db.get(User, user_id)

        unlocked_count, total_count = self.db.execute(
            select(
                func.sum(case((Achievement.unlocked.is_(True), 1), else_=0)),
                func.count(Achievement.id),
            ).where(Achievement.user_id == user_id)
        ).one()

        return MetricsSnapshot(
            assignment_complete_count=completed_count or 0,
            perfect_grade_count=perfect_count,
            course_grades_above=grades_above,
            lms_sync_count=(user.lms_sync_count or 0) if user else 0,
            has_profile_picture=bool(user and user.has_profile_picture),
            prefers_dark_mode=bool(user and user.prefers_dark_mode),
            unlocked_achievements_count=unlocked_count or 0,
            total_achievements_count=total_count or 0,
        )


__all__ = ["MetricsCollector", "MetricsSource"]
