"""Pydantic schemas for wager endpoints."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WagerCreate(BaseModel):
    """Schema for placing a wager.

    Amount and multiplier are validated by the wager service so that every
    rejection carries the same error codes.
    """

    item_id: uuid.UUID
    amount: float
    multiplier: float = 1.0

    model_config = ConfigDict(extra="forbid")


class WagerRead(BaseModel):
    id: uuid.UUID
    item_id: uuid.UUID
    course_id: Optional[uuid.UUID] = None
    title: str
    amount: float
    multiplier: float
    base_score: int
    required_score: int
    resolved: bool
    won: Optional[bool] = None
    points_awarded: Optional[float] = None
    actual_score: Optional[int] = None
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WagerStatsResponse(BaseModel):
    total_wagered: float
    total_won: float
    total_lost: float
    active_wagers: int


class BettableItemRead(BaseModel):
    item_id: uuid.UUID
    title: str
    course_id: uuid.UUID
    course_title: str
    item_type: str
    due_date: Optional[datetime] = None
    points_possible: Optional[int] = None
    status: str

    model_config = ConfigDict(from_attributes=True)


class WagerResolutionRead(BaseModel):
    wager_id: uuid.UUID
    item_id: uuid.UUID
    amount: float
    multiplier: float
    required_score: int
    actual_score: int
    won: bool
    points_awarded: float

    model_config = ConfigDict(from_attributes=True)


class ResolveWagersResponse(BaseModel):
    resolved: list[WagerResolutionRead] = Field(default_factory=list)
    total_resolved: int


__all__ = [
    "BettableItemRead",
    "ResolveWagersResponse",
    "WagerCreate",
    "WagerRead",
    "WagerResolutionRead",
    "WagerStatsResponse",
]
