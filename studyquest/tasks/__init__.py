"""Celery tasks package."""

from studyquest.tasks import achievements, notifications, wagers

__all__ = ["achievements", "notifications", "wagers"]
