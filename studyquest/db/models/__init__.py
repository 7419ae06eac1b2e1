"""Database models package."""
from studyquest.db.models.user import User
from studyquest.db.models.course import Course, GradedItem
from studyquest.db.models.achievement import Achievement
from studyquest.db.models.wager import Wager

__all__ = [
    "User",
    "Course",
    "GradedItem",
    "Achievement",
    "Wager",
]
