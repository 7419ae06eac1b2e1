"""Pydantic models for activity and fixture endpoints."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ActivityRead(BaseModel):
    """Activity inputs the achievement rules read."""

    id: uuid.UUID
    plan: str
    lms_sync_count: int
    has_profile_picture: bool
    prefers_dark_mode: bool

    model_config = ConfigDict(from_attributes=True)


class PreferencesUpdate(BaseModel):
    """Schema for partial updates to profile preferences."""

    theme: Optional[Literal["dark", "light"]] = None
    has_profile_picture: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def ensure_payload_not_empty(self) -> "PreferencesUpdate":
        if not any(value is not None for value in self.model_dump().values()):
            raise ValueError("At least one field must be provided")
        return self


class FixtureItemCreate(BaseModel):
    course_id: uuid.UUID


class FixtureGrade(BaseModel):
    grade: float = Field(ge=0)


class GradedItemRead(BaseModel):
    id: uuid.UUID
    course_id: uuid.UUID
    title: str
    item_type: str
    status: str
    due_date: Optional[datetime] = None
    grade: Optional[float] = None
    points_possible: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "ActivityRead",
    "FixtureGrade",
    "FixtureItemCreate",
    "GradedItemRead",
    "PreferencesUpdate",
]
