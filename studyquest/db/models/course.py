"""Course and graded item records populated by the LMS sync."""
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from studyquest.core.rounding import round_half_up
from studyquest.db.base import Base

DEFAULT_POINTS_POSSIBLE = 100


class Course(Base):
    """A course the user is enrolled in, with the current overall grade."""

    __tablename__ = "courses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    grade = Column(Float)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship("GradedItem", back_populates="course")


class GradedItem(Base):
    """An assignment, quiz or exam that may carry a grade."""

    __tablename__ = "graded_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id = Column(
        UUID(as_uuid=True), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    item_type = Column(String(50), nullable=False, default="assignment")
    status = Column(String(20), nullable=False, default="upcoming")
    due_date = Column(DateTime(timezone=True))
    grade = Column(Float)
    points_possible = Column(Integer)
    completed_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    course = relationship("Course", back_populates="items")

    @property
    def has_real_grade(self) -> bool:
        """Return whether the grade reflects an actual outcome.

        A zero on an item that is not completed is the LMS placeholder for
        "not graded yet"; a zero on a completed item is a real zero.
        """

        if self.grade is None:
            return False
        if self.grade == 0 and self.status != "completed":
            return False
        return True

    @property
    def percent_score(self) -> int | None:
        """Return the grade as a whole-number percentage of points possible."""

        if not self.has_real_grade:
            return None
        possible = self.points_possible or DEFAULT_POINTS_POSSIBLE
        return round_half_up(self.grade / possible * 100)

