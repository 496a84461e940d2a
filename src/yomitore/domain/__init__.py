"""
Domain Layer

Defines constants, entities, and value objects that form the core of the
trainer. Has no dependencies on external libraries.
"""

from yomitore.domain.constants import (
    BADGE_INTERVAL,
    CUMULATIVE_BADGE_CAP,
    LENGTH_OPTIONS,
    SCORE_CRITERIA,
    STREAK_BADGE_CAP,
    SUCCESS_MARKER,
)
from yomitore.domain.entities import (
    Badge,
    BadgeKind,
    EvaluationScores,
    HealthCheckResult,
    ResultHistory,
    TrainingResult,
    WeeklyStats,
)
from yomitore.domain.value_objects import (
    BadgeReport,
    ModelResponse,
    ScoreStats,
    ScoreSummary,
    Verdict,
)

__all__ = [
    # constants
    "BADGE_INTERVAL",
    "CUMULATIVE_BADGE_CAP",
    "LENGTH_OPTIONS",
    "SCORE_CRITERIA",
    "STREAK_BADGE_CAP",
    "SUCCESS_MARKER",
    # entities
    "Badge",
    "BadgeKind",
    "EvaluationScores",
    "HealthCheckResult",
    "ResultHistory",
    "TrainingResult",
    "WeeklyStats",
    # value objects
    "BadgeReport",
    "ModelResponse",
    "ScoreStats",
    "ScoreSummary",
    "Verdict",
]
