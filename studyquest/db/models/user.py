"""User profile model."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from studyquest.db.base import Base


class User(Base):
    """Profile record owned by the external auth provider.

    Only the columns the points economy reads or updates live here; the
    credentials themselves stay with the provider.
    """

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    display_name = Column(String(255))

    # Subscription
    plan = Column(String(20), nullable=False, default="free")

    # Activity inputs for achievements
    has_profile_picture = Column(Boolean, nullable=False, default=False)
    prefers_dark_mode = Column(Boolean, nullable=False, default=False)
    lms_sync_count = Column(Integer, nullable=False, default=0)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    is_active = Column(Boolean, default=True)

    @property
    def is_premium(self) -> bool:
        return self.plan == "premium"
