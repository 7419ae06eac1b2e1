"""Fixture item endpoints for exercising wagers end to end in development."""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from studyquest.api import deps
from studyquest.db.models.user import User
from studyquest.schemas.activity import FixtureGrade, FixtureItemCreate, GradedItemRead
from studyquest.services.settlement import SettlementService
from studyquest.utils.exceptions import DataStoreError, ItemNotFound, handle_database_error

router = APIRouter(
    prefix="/fixtures",
    tags=["fixtures"],
    dependencies=[Depends(deps.require_fixture_items)],
)


@router.post("/items", response_model=GradedItemRead, status_code=status.HTTP_201_CREATED)
def create_fixture_item(
    payload: FixtureItemCreate,
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> GradedItemRead:
    try:
        item = SettlementService(db).create_fixture_item(current_user.id, payload.course_id)
    except ItemNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except DataStoreError as exc:
        raise handle_database_error(exc) from exc
    return GradedItemRead.model_validate(item)


@router.post("/items/{item_id}/grade", response_model=GradedItemRead)
def grade_fixture_item(
    item_id: uuid.UUID,
    payload: FixtureGrade,
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> GradedItemRead:
    """Grade the fixture item; pending wagers settle on the next resolve."""

    service = SettlementService(db)
    try:
        item = service.grade_fixture_item(item_id, payload.grade, user_id=current_user.id)
    except ItemNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except DataStoreError as exc:
        raise handle_database_error(exc) from exc
    return GradedItemRead.model_validate(item)
