"""Wager placement, history and statistics."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from loguru import logger
from sqlalchemy import case, func, insert, literal, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyquest.config import settings
from studyquest.core.odds import Tier, required_score_from_multiplier
from studyquest.db.models.course import Course, GradedItem
from studyquest.db.models.user import User
from studyquest.db.models.wager import Wager
from studyquest.services.odds import OddsService, tier_limits
from studyquest.services.points import PointsLedger
from studyquest.utils.exceptions import (
    AlreadyGraded,
    DataStoreError,
    InsufficientBalance,
    InvalidAmount,
    InvalidMultiplier,
    ItemNotFound,
    OverTierLimit,
    PastDue,
)

BETTABLE_TYPE_KEYWORDS = ("quiz", "test", "exam", "assessment")

_INSERT_COLUMNS = (
    "id",
    "user_id",
    "item_id",
    "course_id",
    "title",
    "amount",
    "multiplier",
    "base_score",
    "required_score",
    "resolved",
    "created_at",
    "updated_at",
)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes from the store as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class WagerPlan:
    """A validated wager that has not been written yet."""

    user_id: uuid.UUID
    item: GradedItem
    tier: Tier
    amount: float
    multiplier: float
    base_score: int
    required_score: int


@dataclass
class WagerStats:
    total_wagered: float
    total_won: float
    total_lost: float
    active_wagers: int


@dataclass
class BettableItem:
    item_id: uuid.UUID
    title: str
    course_id: uuid.UUID
    course_title: str
    item_type: str
    due_date: datetime | None
    points_possible: int | None
    status: str


class WagerService:
    """Validate and place wagers against upcoming graded items."""

    def __init__(
        self,
        db: Session,
        *,
        ledger: PointsLedger | None = None,
        odds: OddsService | None = None,
    ) -> None:
        self.db = db
        self.ledger = ledger or PointsLedger(db)
        self.odds = odds or OddsService(db)

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def validate_wager(
        self,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        amount: float,
        multiplier: float,
        *,
        now: datetime | None = None,
    ) -> WagerPlan:
        """Run every placement check without writing; raise on the first failure."""

        now = now or datetime.now(timezone.utc)
        try:
            return self._validate(user_id, item_id, amount, multiplier, now)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DataStoreError("Could not validate wager", {"error": str(exc)}) from exc

    def _validate(
        self,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        amount: float,
        multiplier: float,
        now: datetime,
    ) -> WagerPlan:
        item = self.db.get(GradedItem, item_id)
        if item is None or item.user_id != user_id:
            raise ItemNotFound("Graded item not found", {"item_id": str(item_id)})

        if item.has_real_grade:
            raise AlreadyGraded(
                f"Cannot wager on already graded item: {item.title}",
                {"item_id": str(item.id), "grade": item.grade},
            )

        if item.title != settings.FIXTURE_ITEM_TITLE and item.due_date is not None:
            if ensure_utc(item.due_date) < now:
                raise PastDue(
                    f"Cannot wager on past due item: {item.title}",
                    {"item_id": str(item.id), "due_date": ensure_utc(item.due_date).isoformat()},
                )

        tier = self.odds.get_tier(user_id)
        limits = tier_limits(tier)
        if multiplier < 1.0:
            raise InvalidMultiplier("Multiplier must be at least 1.0x", {"multiplier": multiplier})
        if multiplier > limits.max_multiplier:
            raise OverTierLimit(
                f"{tier.value.capitalize()} accounts are limited to {limits.max_multiplier}x multiplier",
                {"multiplier": multiplier, "max_multiplier": limits.max_multiplier},
            )

        if amount <= 0:
            raise InvalidAmount("Wager amount must be greater than 0", {"amount": amount})

        spendable = self.ledger.spendable_points(user_id)
        if amount > spendable:
            raise InsufficientBalance(
                "Wager amount cannot exceed available points",
                {"amount": amount, "spendable": spendable},
            )

        if tier is Tier.FREE:
            # share of the gross achievement total, stakes included
            achievement_points = self.ledger.achievement_points(user_id)
            max_amount = achievement_points * limits.max_bet_percentage
            if amount > max_amount:
                raise OverTierLimit(
                    f"Free accounts can only wager up to {round(max_amount)} points "
                    f"({limits.max_bet_percentage * 100:g}% of {achievement_points:g} achievement points)",
                    {"amount": amount, "max_amount": max_amount},
                )

        estimate = self.odds.get_score_estimate(user_id, item.course_id, exclude_item_id=item.id)
        required = required_score_from_multiplier(estimate.base_score, multiplier, tier)
        return WagerPlan(
            user_id=user_id,
            item=item,
            tier=tier,
            amount=float(amount),
            multiplier=float(multiplier),
            base_score=estimate.base_score,
            required_score=required,
        )

    def create_wager(
        self,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        amount: float,
        multiplier: float,
        *,
        now: datetime | None = None,
    ) -> Wager:
        """Validate and place a wager, freezing its required score.

        The insert re-checks the balance inside the database, so two
        concurrent placements cannot both spend the same points.
        """

        now = now or datetime.now(timezone.utc)
        plan = self.validate_wager(user_id, item_id, amount, multiplier, now=now)
        try:
            wager_id = self._insert(plan, now)
            wager = self.db.get(Wager, wager_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DataStoreError("Could not place wager", {"error": str(exc)}) from exc

        logger.info(
            "Wager placed",
            user_id=str(user_id),
            wager_id=str(wager_id),
            amount=plan.amount,
            multiplier=plan.multiplier,
            required_score=plan.required_score,
        )
        return wager

    def _insert(self, plan: WagerPlan, now: datetime) -> uuid.UUID:
        # serialise placements per user where the backend supports row locks
        self.db.execute(select(User.id).where(User.id == plan.user_id).with_for_update())

        wager_id = uuid.uuid4()
        values = select(
            literal(wager_id, Wager.id.type),
            literal(plan.user_id, Wager.user_id.type),
            literal(plan.item.id, Wager.item_id.type),
            literal(plan.item.course_id, Wager.course_id.type),
            literal(plan.item.title, Wager.title.type),
            literal(plan.amount, Wager.amount.type),
            literal(plan.multiplier, Wager.multiplier.type),
            literal(plan.base_score, Wager.base_score.type),
            literal(plan.required_score, Wager.required_score.type),
            literal(False, Wager.resolved.type),
            literal(now, Wager.created_at.type),
            literal(now, Wager.updated_at.type),
        ).where(PointsLedger.balance_condition(plan.user_id, plan.amount))

        result = self.db.execute(insert(Wager.__table__).from_select(list(_INSERT_COLUMNS), values))
        if result.rowcount != 1:
            self.db.rollback()
            raise InsufficientBalance(
                "Wager amount cannot exceed available points",
                {"amount": plan.amount},
            )
        self.db.commit()
        return wager_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_wagers(self, user_id: uuid.UUID, *, include_resolved: bool = True) -> list[Wager]:
        stmt = select(Wager).where(Wager.user_id == user_id)
        if not include_resolved:
            stmt = stmt.where(Wager.resolved.is_(False))
        return list(self.db.scalars(stmt.order_by(Wager.created_at.desc())).all())

    def get_stats(self, user_id: uuid.UUID) -> WagerStats:
        row = self.db.execute(
            select(
                func.coalesce(func.sum(Wager.amount), 0.0),
                func.coalesce(
                    func.sum(case((Wager.won.is_(True), Wager.points_awarded), else_=0.0)), 0.0
                ),
                func.coalesce(
                    func.sum(
                        case(
                            ((Wager.resolved.is_(True)) & (Wager.won.is_(False)), Wager.amount),
                            else_=0.0,
                        )
                    ),
                    0.0,
                ),
                func.coalesce(func.sum(case((Wager.resolved.is_(False), 1), else_=0)), 0),
            ).where(Wager.user_id == user_id)
        ).one()
        total_wagered, total_won, total_lost, active = row
        return WagerStats(
            total_wagered=float(total_wagered),
            total_won=float(total_won),
            total_lost=float(total_lost),
            active_wagers=int(active),
        )

    def list_bettable_items(self, user_id: uuid.UUID, *, now: datetime | None = None) -> list[BettableItem]:
        """Upcoming quizzes, tests and exams that can still take a wager."""

        now = now or datetime.now(timezone.utc)
        horizon = now + timedelta(days=settings.BETTABLE_WINDOW_DAYS)
        rows = self.db.execute(
            select(GradedItem, Course.title)
            .join(Course, GradedItem.course_id == Course.id)
            .where(GradedItem.user_id == user_id)
        ).all()

        items: list[BettableItem] = []
        for item, course_title in rows:
            if not self._is_bettable(item, now, horizon):
                continue
            items.append(
                BettableItem(
                    item_id=item.id,
                    title=item.title,
                    course_id=item.course_id,
                    course_title=course_title,
                    item_type=item.item_type,
                    due_date=ensure_utc(item.due_date) if item.due_date else None,
                    points_possible=item.points_possible,
                    status=item.status,
                )
            )

        far_future = datetime.max.replace(tzinfo=timezone.utc)
        items.sort(key=lambda entry: entry.due_date or far_future)
        return items

    @staticmethod
    def _is_bettable(item: GradedItem, now: datetime, horizon: datetime) -> bool:
        if item.title == settings.FIXTURE_ITEM_TITLE:
            return True
        item_type = (item.item_type or "").lower()
        if not any(keyword in item_type for keyword in BETTABLE_TYPE_KEYWORDS):
            return False
        if item.has_real_grade:
            return False
        if item.due_date is None:
            return True
        return now <= ensure_utc(item.due_date) <= horizon


__all__ = [
    "BettableItem",
    "WagerPlan",
    "WagerService",
    "WagerStats",
    "ensure_utc",
]
