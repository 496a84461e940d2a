"""
Domain Entities

Defines the training results, the append-only history they live in, and the
badges derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Iterator


@dataclass(frozen=True)
class EvaluationScores:
    """Evaluator sub-scores kept alongside a recorded result"""
    appropriate: bool | None = None
    importance: int | None = None
    conciseness: int | None = None
    accuracy: int | None = None
    improvements: tuple[str, ...] = ()

    def score(self, criterion: str) -> int | None:
        """Return the score for a criterion name, or None when absent"""
        return getattr(self, criterion, None)


@dataclass(frozen=True)
class TrainingResult:
    """One recorded pass/fail outcome"""
    timestamp: datetime
    passed: bool
    evaluation: EvaluationScores | None = None


class ResultHistory:
    """
    Ordered, append-only log of training results.

    Insertion order is chronological order. Nothing in the package removes or
    reorders entries; derived values (streak, badges) are always recomputed
    from this log.
    """

    def __init__(self, results: Iterable[TrainingResult] = ()) -> None:
        self._results: list[TrainingResult] = list(results)

    def append(self, result: TrainingResult) -> None:
        self._results.append(result)

    def extended(self, result: TrainingResult) -> ResultHistory:
        """Return a new history with one more result, leaving this one untouched"""
        return ResultHistory([*self._results, result])

    @property
    def results(self) -> tuple[TrainingResult, ...]:
        return tuple(self._results)

    def passed_count(self) -> int:
        return sum(1 for r in self._results if r.passed)

    def failed_count(self) -> int:
        return len(self._results) - self.passed_count()

    def __iter__(self) -> Iterator[TrainingResult]:
        return iter(tuple(self._results))

    def __len__(self) -> int:
        return len(self._results)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResultHistory):
            return NotImplemented
        return self._results == other._results

    def __repr__(self) -> str:
        return f"ResultHistory({len(self._results)} results)"


class BadgeKind(Enum):
    """Badge families"""
    CONSECUTIVE_STREAK = "consecutive_streak"
    CUMULATIVE_MILESTONE = "cumulative_milestone"


@dataclass(frozen=True)
class Badge:
    """A permanent achievement marker"""
    kind: BadgeKind
    threshold: int
    earned_at: datetime

    @property
    def icon(self) -> str:
        if self.kind is BadgeKind.CONSECUTIVE_STREAK:
            return "🔥"
        return "⭐"

    @property
    def display_text(self) -> str:
        if self.kind is BadgeKind.CONSECUTIVE_STREAK:
            return f"{self.threshold} streak"
        return f"{self.threshold} total"


@dataclass
class WeeklyStats:
    """Pass/fail counts for one rolling 7-day window"""
    week_number: int
    correct: int
    incorrect: int

    @property
    def total(self) -> int:
        return self.correct + self.incorrect


@dataclass
class HealthCheckResult:
    """Health check result"""
    model_name: str
    success: bool
    latency_ms: int | None
    error: str | None
