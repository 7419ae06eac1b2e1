"""Points ledger: totals and spendable balance computed from persisted rows.

Nothing here is stored or cached. Every figure is derived from the
``achievements`` and ``wagers`` tables on each call:

* achievement points: full points for unlocked rows, ``points * progress / 100``
  for rows still in progress
* settled net: ``points_awarded - amount`` summed over resolved wagers
* total: ``max(0, achievement points + settled net)``
* spendable: ``max(0, total - sum of unresolved stakes)``
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy import Float, case, cast, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from studyquest.core.levels import LevelProgress, calculate_level_progress, points_to_next_level
from studyquest.db.models.achievement import Achievement
from studyquest.db.models.wager import Wager


@dataclass
class PointsSummary:
    achievement_points: float
    settled_wager_net: float
    total_points: float
    staked_points: float
    spendable_points: float
    level: LevelProgress
    points_to_next_level: float


def _achievement_points_query(user_id: uuid.UUID):
    earned = case(
        (Achievement.unlocked.is_(True), cast(Achievement.points, Float)),
        else_=cast(Achievement.points, Float) * cast(Achievement.progress, Float) / 100.0,
    )
    return select(cast(func.coalesce(func.sum(earned), 0.0), Float)).where(
        Achievement.user_id == user_id
    )


def _settled_net_query(user_id: uuid.UUID):
    net = cast(func.coalesce(Wager.points_awarded, 0.0), Float) - cast(Wager.amount, Float)
    return select(cast(func.coalesce(func.sum(net), 0.0), Float)).where(
        Wager.user_id == user_id,
        Wager.resolved.is_(True),
    )


def _staked_query(user_id: uuid.UUID):
    return select(cast(func.coalesce(func.sum(Wager.amount), 0.0), Float)).where(
        Wager.user_id == user_id,
        Wager.resolved.is_(False),
    )


class PointsLedger:
    """Computed view over a user's achievements and wagers."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def achievement_points(self, user_id: uuid.UUID) -> float:
        return max(0.0, float(self.db.scalar(_achievement_points_query(user_id)) or 0.0))

    def settled_wager_net(self, user_id: uuid.UUID) -> float:
        return float(self.db.scalar(_settled_net_query(user_id)) or 0.0)

    def staked_points(self, user_id: uuid.UUID) -> float:
        return float(self.db.scalar(_staked_query(user_id)) or 0.0)

    def total_points(self, user_id: uuid.UUID) -> float:
        return max(0.0, self.achievement_points(user_id) + self.settled_wager_net(user_id))

    def spendable_points(self, user_id: uuid.UUID) -> float:
        return max(0.0, self.total_points(user_id) - self.staked_points(user_id))

    def summary(self, user_id: uuid.UUID) -> PointsSummary:
        achievement_points = self.achievement_points(user_id)
        settled = self.settled_wager_net(user_id)
        total = max(0.0, achievement_points + settled)
        staked = self.staked_points(user_id)
        return PointsSummary(
            achievement_points=achievement_points,
            settled_wager_net=settled,
            total_points=total,
            staked_points=staked,
            spendable_points=max(0.0, total - staked),
            level=calculate_level_progress(total),
            points_to_next_level=points_to_next_level(total),
        )

    @staticmethod
    def balance_condition(user_id: uuid.UUID, amount: float) -> ColumnElement[bool]:
        """SQL condition that holds when ``amount`` fits the spendable balance.

        Evaluated by the database at write time, so it sees wagers committed
        by concurrent requests.
        """

        achievement_points = _achievement_points_query(user_id).scalar_subquery()
        settled = _settled_net_query(user_id).scalar_subquery()
        staked = _staked_query(user_id).scalar_subquery()
        return achievement_points + settled - staked >= amount


__all__ = ["PointsLedger", "PointsSummary"]
