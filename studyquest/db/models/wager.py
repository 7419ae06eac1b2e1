"""Wager model."""
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from studyquest.db.base import Base


class Wager(Base):
    """Points staked on the outcome of one graded item.

    ``required_score`` is frozen when the wager is placed. Once ``resolved``
    is true the row is never written again.
    """

    __tablename__ = "wagers"
    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        CheckConstraint("multiplier >= 1.0", name="multiplier_min"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id = Column(
        UUID(as_uuid=True), ForeignKey("graded_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id = Column(UUID(as_uuid=True), ForeignKey("courses.id", ondelete="SET NULL"))
    title = Column(String(255), nullable=False)

    amount = Column(Float, nullable=False)
    multiplier = Column(Float, nullable=False, default=1.0)
    base_score = Column(Integer, nullable=False)
    required_score = Column(Integer, nullable=False)

    resolved = Column(Boolean, nullable=False, default=False, index=True)
    won = Column(Boolean)
    points_awarded = Column(Float)
    actual_score = Column(Integer)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    resolved_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    item = relationship("GradedItem")
    user = relationship("User", backref="wagers")
