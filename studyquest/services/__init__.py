"""Service layer package."""

from studyquest.services.achievement import AchievementService
from studyquest.services.activity import ActivityService
from studyquest.services.metrics import MetricsCollector
from studyquest.services.odds import OddsService
from studyquest.services.points import PointsLedger
from studyquest.services.settlement import SettlementService
from studyquest.services.wager import WagerService

__all__ = [
    "AchievementService",
    "ActivityService",
    "MetricsCollector",
    "OddsService",
    "PointsLedger",
    "SettlementService",
    "WagerService",
]
