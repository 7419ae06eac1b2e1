"""Achievement catalog and progress rules."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from studyquest.core.rounding import round_half_up

COURSE_GRADE_THRESHOLDS: tuple[int, ...] = (90, 85, 80, 75, 70)


@dataclass(frozen=True)
class MetricsSnapshot:
    """Activity counts for one user, recomputed on every evaluation pass."""

    assignment_complete_count: int = 0
    perfect_grade_count: int = 0
    course_grades_above: Mapping[int, int] = field(default_factory=dict)
    lms_sync_count: int = 0
    has_profile_picture: bool = False
    prefers_dark_mode: bool = False
    unlocked_achievements_count: int = 0
    total_achievements_count: int = 0

    @classmethod
    def empty(cls) -> "MetricsSnapshot":
        return cls(course_grades_above={threshold: 0 for threshold in COURSE_GRADE_THRESHOLDS})

    @property
    def is_empty(self) -> bool:
        """True when every count is zero and every flag is off.

        This is what the collector returns when the store is unreachable, so
        it means "no data" rather than "nothing achieved".
        """

        return (
            not self.assignment_complete_count
            and not self.perfect_grade_count
            and not any(self.course_grades_above.values())
            and not self.lms_sync_count
            and not self.has_profile_picture
            and not self.prefers_dark_mode
            and not self.total_achievements_count
        )


class RuleKind(str, Enum):
    COUNT_THRESHOLD = "count_threshold"
    BINARY_FLAG = "binary_flag"
    THRESHOLD_OF_THRESHOLDS = "threshold_of_thresholds"


class ProgressMode(str, Enum):
    RATIO = "ratio"
    BINARY = "binary"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_POINTS = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 30,
    Difficulty.HARD: 50,
}


@dataclass(frozen=True)
class RequirementRule:
    """Declarative condition over one metric.

    ``count_threshold`` reads an integer metric, ``binary_flag`` a boolean one
    (counted as 0 or 1) and ``threshold_of_thresholds`` the number of courses
    at or above ``threshold`` percent.
    """

    kind: RuleKind
    metric: str
    count: int = 1
    threshold: int | None = None
    mode: ProgressMode = ProgressMode.RATIO

    def current_value(self, metrics: MetricsSnapshot) -> int:
        if self.kind is RuleKind.THRESHOLD_OF_THRESHOLDS:
            return int(metrics.course_grades_above.get(self.threshold, 0))
        value = getattr(metrics, self.metric)
        if self.kind is RuleKind.BINARY_FLAG:
            return 1 if value else 0
        return int(value or 0)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "kind": self.kind.value,
            "metric": self.metric,
            "count": self.count,
            "mode": self.mode.value,
        }
        if self.threshold is not None:
            payload["threshold"] = self.threshold
        return payload


@dataclass(frozen=True)
class AchievementDefinition:
    """Template for one catalog achievement.

    Sticky achievements are never recomputed once unlocked; every other
    achievement is re-evaluated on each pass and may fall back to 0.
    """

    title: str
    description: str
    icon: str
    difficulty: Difficulty
    rule: RequirementRule
    sticky: bool = False

    @property
    def points(self) -> int:
        return DIFFICULTY_POINTS[self.difficulty]


def calculate_progress(rule: RequirementRule, metrics: MetricsSnapshot) -> tuple[int, bool]:
    """Return ``(progress, unlocked)`` for ``rule`` against ``metrics``."""

    current = rule.current_value(metrics)
    required = max(1, rule.count)
    if rule.mode is ProgressMode.BINARY:
        progress = 100 if current >= required else 0
    else:
        progress = min(100, round_half_up(current / required * 100))
    progress = max(0, progress)
    return progress, progress == 100


ACHIEVEMENT_CATALOG: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        title="First Steps",
        description="Connect your LMS account to the application",
        icon="graduation-cap",
        difficulty=Difficulty.EASY,
        rule=RequirementRule(
            RuleKind.COUNT_THRESHOLD, "lms_sync_count", count=1, mode=ProgressMode.BINARY
        ),
        sticky=True,
    ),
    AchievementDefinition(
        title="5 Guys",
        description="Mark 5 assignments as complete",
        icon="check-square",
        difficulty=Difficulty.EASY,
        rule=RequirementRule(RuleKind.COUNT_THRESHOLD, "assignment_complete_count", count=5),
    ),
    AchievementDefinition(
        title="35 Guys",
        description="Mark 35 assignments as complete",
        icon="check-square",
        difficulty=Difficulty.MEDIUM,
        rule=RequirementRule(RuleKind.COUNT_THRESHOLD, "assignment_complete_count", count=35),
    ),
    AchievementDefinition(
        title="65 Guys",
        description="Mark 65 assignments as complete",
        icon="check-square",
        difficulty=Difficulty.HARD,
        rule=RequirementRule(RuleKind.COUNT_THRESHOLD, "assignment_complete_count", count=65),
    ),
    AchievementDefinition(
        title="Good Looks",
        description="Upload a profile picture",
        icon="image",
        difficulty=Difficulty.EASY,
        rule=RequirementRule(RuleKind.BINARY_FLAG, "has_profile_picture", mode=ProgressMode.BINARY),
    ),
    AchievementDefinition(
        title="Ace",
        description="Get 15 assignments graded 100%",
        icon="award",
        difficulty=Difficulty.MEDIUM,
        rule=RequirementRule(RuleKind.COUNT_THRESHOLD, "perfect_grade_count", count=15),
    ),
    AchievementDefinition(
        title="Getting There",
        description="Have at least 1 course with a grade of 90% or more",
        icon="trending-up",
        difficulty=Difficulty.EASY,
        rule=RequirementRule(
            RuleKind.THRESHOLD_OF_THRESHOLDS, "course_grades_above", count=1, threshold=90
        ),
    ),
    AchievementDefinition(
        title="Getting Closer",
        description="Have at least 3 courses with grades of 90% or more",
        icon="trending-up",
        difficulty=Difficulty.MEDIUM,
        rule=RequirementRule(
            RuleKind.THRESHOLD_OF_THRESHOLDS, "course_grades_above", count=3, threshold=90
        ),
    ),
    AchievementDefinition(
        title="Got There",
        description="Have at least 5 courses with grades of 90% or more",
        icon="trophy",
        difficulty=Difficulty.HARD,
        rule=RequirementRule(
            RuleKind.THRESHOLD_OF_THRESHOLDS, "course_grades_above", count=5, threshold=90
        ),
    ),
    AchievementDefinition(
        title="Day N Nite",
        description="Enable dark mode in the application",
        icon="moon",
        difficulty=Difficulty.EASY,
        rule=RequirementRule(RuleKind.BINARY_FLAG, "prefers_dark_mode", mode=ProgressMode.BINARY),
        sticky=True,
    ),
)


__all__ = [
    "ACHIEVEMENT_CATALOG",
    "COURSE_GRADE_THRESHOLDS",
    "DIFFICULTY_POINTS",
    "AchievementDefinition",
    "Difficulty",
    "MetricsSnapshot",
    "ProgressMode",
    "RequirementRule",
    "RuleKind",
    "calculate_progress",
]
