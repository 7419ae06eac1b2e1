"""Per-user achievement progress model."""
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from studyquest.db.base import Base


class Achievement(Base):
    """A user's progress toward one catalog achievement.

    Rows are keyed by ``(user_id, title)``; ``requirement`` stores the rule
    snapshot the row was created from so the UI can render it without the
    catalog.
    """

    __tablename__ = "achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "title", name="uq_achievements_user_id_title"),
        CheckConstraint("progress >= 0 AND progress <= 100", name="progress_range"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(100), nullable=False)
    description = Column(Text)
    icon = Column(String(50))
    difficulty = Column(String(20), nullable=False, default="easy")
    points = Column(Integer, nullable=False, default=0)
    requirement = Column(JSON, nullable=False, default=dict)

    progress = Column(Integer, nullable=False, default=0)
    unlocked = Column(Boolean, nullable=False, default=False)
    unlocked_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", backref="achievements")
