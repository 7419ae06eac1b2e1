"""Points summary endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyquest.api import deps
from studyquest.db.models.user import User
from studyquest.schemas.points import LevelRead, PointsSummaryResponse
from studyquest.services.points import PointsLedger
from studyquest.utils.exceptions import handle_database_error

router = APIRouter(prefix="/points", tags=["points"])


@router.get("", response_model=PointsSummaryResponse)
def read_points(
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> PointsSummaryResponse:
    """Return total, staked and spendable points with the current level."""

    try:
        summary = PointsLedger(db).summary(current_user.id)
    except SQLAlchemyError as exc:
        raise handle_database_error(exc) from exc

    return PointsSummaryResponse(
        achievement_points=summary.achievement_points,
        settled_wager_net=summary.settled_wager_net,
        total_points=summary.total_points,
        staked_points=summary.staked_points,
        spendable_points=summary.spendable_points,
        level=LevelRead(
            level=summary.level.level,
            current_threshold=summary.level.current_threshold,
            next_threshold=summary.level.next_threshold,
            progress=summary.level.progress,
        ),
        points_to_next_level=summary.points_to_next_level,
    )
