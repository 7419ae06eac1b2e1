"""API endpoint modules for v1."""

from studyquest.api.v1.endpoints import (
    achievements,
    activity,
    fixtures,
    odds,
    points,
    wagers,
)

__all__ = [
    "achievements",
    "activity",
    "fixtures",
    "odds",
    "points",
    "wagers",
]
