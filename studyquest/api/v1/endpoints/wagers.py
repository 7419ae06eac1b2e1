"""Wager endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from studyquest.api import deps
from studyquest.db.models.user import User
from studyquest.schemas.wager import (
    BettableItemRead,
    ResolveWagersResponse,
    WagerCreate,
    WagerRead,
    WagerResolutionRead,
    WagerStatsResponse,
)
from studyquest.services.settlement import SettlementService
from studyquest.services.wager import WagerService
from studyquest.utils.exceptions import (
    DataStoreError,
    WagerError,
    handle_database_error,
    handle_wager_error,
)

router = APIRouter(prefix="/wagers", tags=["wagers"])


@router.get("", response_model=list[WagerRead])
def list_wagers(
    include_resolved: bool = Query(True, description="Include settled wagers"),
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> list[WagerRead]:
    wagers = WagerService(db).list_wagers(current_user.id, include_resolved=include_resolved)
    return [WagerRead.model_validate(wager) for wager in wagers]


@router.post("", response_model=WagerRead, status_code=status.HTTP_201_CREATED)
def place_wager(
    payload: WagerCreate,
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> WagerRead:
    """Stake points on an upcoming graded item."""

    service = WagerService(db)
    try:
        wager = service.create_wager(
            current_user.id, payload.item_id, payload.amount, payload.multiplier
        )
    except WagerError as exc:
        raise handle_wager_error(exc) from exc
    except DataStoreError as exc:
        raise handle_database_error(exc) from exc
    return WagerRead.model_validate(wager)


@router.get("/stats", response_model=WagerStatsResponse)
def read_stats(
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> WagerStatsResponse:
    stats = WagerService(db).get_stats(current_user.id)
    return WagerStatsResponse(
        total_wagered=stats.total_wagered,
        total_won=stats.total_won,
        total_lost=stats.total_lost,
        active_wagers=stats.active_wagers,
    )


@router.get("/bettable", response_model=list[BettableItemRead])
def list_bettable_items(
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> list[BettableItemRead]:
    """Return upcoming items that can still take a wager."""

    items = WagerService(db).list_bettable_items(current_user.id)
    return [BettableItemRead.model_validate(item) for item in items]


@router.post("/resolve", response_model=ResolveWagersResponse)
def resolve_wagers(
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> ResolveWagersResponse:
    """Settle every pending wager whose item has been graded."""

    try:
        resolutions = SettlementService(db).resolve_pending_wagers(current_user.id)
    except DataStoreError as exc:
        raise handle_database_error(exc) from exc
    return ResolveWagersResponse(
        resolved=[WagerResolutionRead.model_validate(item) for item in resolutions],
        total_resolved=len(resolutions),
    )
