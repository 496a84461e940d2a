"""
Domain Value Objects

Immutable values passed between layers: model responses, parsed verdicts,
badge engine output and score statistics.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from yomitore.domain.entities import Badge, EvaluationScores
from yomitore.errors import UnparseableVerdict


@dataclass
class ModelResponse:
    """Model response"""
    output: str
    latency_ms: int
    model_name: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass(frozen=True)
class Verdict:
    """
    Structured result of evaluating a summary.

    `overall_pass` follows the success-marker literal only. `determinate` tells
    whether the evaluator committed to a result at all; an indeterminate
    verdict is shown to the user but never recorded.
    """
    overall_pass: bool
    raw_text: str
    determinate: bool = False
    scores: tuple[tuple[str, int], ...] = ()
    appropriate: bool | None = None
    improvements: tuple[str, ...] = ()

    def score(self, criterion: str) -> int | None:
        """Return the sub-score for `criterion`, or None if the evaluator gave none"""
        return dict(self.scores).get(criterion)

    def require_outcome(self) -> bool:
        """
        Return the pass/fail outcome.

        Raises:
            UnparseableVerdict: If the evaluator did not commit to a result
        """
        if not self.determinate:
            raise UnparseableVerdict("Evaluator output has no overall result")
        return self.overall_pass

    def to_scores(self) -> EvaluationScores:
        """Convert to the sub-score record stored with a TrainingResult"""
        return EvaluationScores(
            appropriate=self.appropriate,
            importance=self.score("importance"),
            conciseness=self.score("conciseness"),
            accuracy=self.score("accuracy"),
            improvements=self.improvements,
        )


@dataclass(frozen=True)
class BadgeReport:
    """Badge engine output"""
    streak: int
    badges: tuple[Badge, ...] = ()
    total_passed: int = 0


@dataclass(frozen=True)
class ScoreStats:
    """Average and median of one evaluator criterion"""
    average: float
    median: float


@dataclass
class ScoreSummary:
    """Sub-score statistics over the recorded history"""
    count: int
    criteria: dict[str, ScoreStats | None] = field(default_factory=dict)
