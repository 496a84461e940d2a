"""Tests for domain entities and value objects"""

from datetime import datetime, timezone

import pytest

from yomitore.domain.entities import (
    Badge,
    BadgeKind,
    EvaluationScores,
    HealthCheckResult,
    ResultHistory,
    TrainingResult,
    WeeklyStats,
)
from yomitore.domain.value_objects import ModelResponse, Verdict
from yomitore.errors import UnparseableVerdict


def _ts(minute: int) -> datetime:
    return datetime(2026, 1, 1, 12, minute, tzinfo=timezone.utc)


class TestResultHistory:
    def test_empty_by_default(self):
        history = ResultHistory()
        assert len(history) == 0
        assert history.passed_count() == 0
        assert history.failed_count() == 0

    def test_append_keeps_insertion_order(self):
        history = ResultHistory()
        first = TrainingResult(_ts(0), True)
        second = TrainingResult(_ts(1), False)
        history.append(first)
        history.append(second)
        assert history.results == (first, second)
        assert list(history) == [first, second]

    def test_counts(self):
        history = ResultHistory([
            TrainingResult(_ts(0), True),
            TrainingResult(_ts(1), False),
            TrainingResult(_ts(2), True),
        ])
        assert history.passed_count() == 2
        assert history.failed_count() == 1

    def test_extended_returns_new_history(self):
        history = ResultHistory([TrainingResult(_ts(0), True)])
        longer = history.extended(TrainingResult(_ts(1), False))
        assert len(history) == 1
        assert len(longer) == 2

    def test_results_is_a_snapshot(self):
        history = ResultHistory([TrainingResult(_ts(0), True)])
        snapshot = history.results
        history.append(TrainingResult(_ts(1), True))
        assert len(snapshot) == 1

    def test_equality(self):
        a = ResultHistory([TrainingResult(_ts(0), True)])
        b = ResultHistory([TrainingResult(_ts(0), True)])
        assert a == b
        assert a != ResultHistory()


class TestTrainingResult:
    def test_evaluation_defaults_to_none(self):
        result = TrainingResult(_ts(0), True)
        assert result.evaluation is None

    def test_frozen(self):
        result = TrainingResult(_ts(0), True)
        with pytest.raises(AttributeError):
            result.passed = False  # type: ignore[misc]


class TestEvaluationScores:
    def test_score_lookup(self):
        scores = EvaluationScores(importance=4, conciseness=3, accuracy=5)
        assert scores.score("importance") == 4
        assert scores.score("accuracy") == 5

    def test_missing_score_is_none(self):
        assert EvaluationScores().score("conciseness") is None


class TestBadge:
    def test_streak_badge_display(self):
        badge = Badge(BadgeKind.CONSECUTIVE_STREAK, 5, _ts(0))
        assert badge.icon == "🔥"
        assert badge.display_text == "5 streak"

    def test_cumulative_badge_display(self):
        badge = Badge(BadgeKind.CUMULATIVE_MILESTONE, 10, _ts(0))
        assert badge.icon == "⭐"
        assert badge.display_text == "10 total"

    def test_badges_are_hashable(self):
        badge = Badge(BadgeKind.CONSECUTIVE_STREAK, 5, _ts(0))
        assert badge in {badge}


class TestWeeklyStats:
    def test_total(self):
        assert WeeklyStats(week_number=1, correct=3, incorrect=2).total == 5


class TestHealthCheckResult:
    def test_success(self):
        result = HealthCheckResult(model_name="fixed", success=True, latency_ms=12, error=None)
        assert result.success is True
        assert result.error is None


class TestModelResponse:
    def test_token_defaults(self):
        response = ModelResponse(output="hi", latency_ms=10, model_name="m")
        assert response.input_tokens == 0
        assert response.output_tokens == 0


class TestVerdict:
    def test_require_outcome_when_determinate(self):
        verdict = Verdict(overall_pass=True, raw_text="Overall: PASS", determinate=True)
        assert verdict.require_outcome() is True

    def test_require_outcome_when_indeterminate(self):
        verdict = Verdict(overall_pass=False, raw_text="???")
        with pytest.raises(UnparseableVerdict):
            verdict.require_outcome()

    def test_hashable_value(self):
        first = Verdict(overall_pass=True, raw_text="x", determinate=True, scores=(("accuracy", 5),))
        second = Verdict(overall_pass=True, raw_text="x", determinate=True, scores=(("accuracy", 5),))
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_score_lookup(self):
        verdict = Verdict(overall_pass=False, raw_text="", scores=(("importance", 3),))
        assert verdict.score("importance") == 3
        assert verdict.score("accuracy") is None

    def test_to_scores(self):
        verdict = Verdict(
            overall_pass=True,
            raw_text="",
            determinate=True,
            scores=(("importance", 4), ("accuracy", 2)),
            appropriate=True,
            improvements=("a", "b"),
        )
        scores = verdict.to_scores()
        assert scores == EvaluationScores(
            appropriate=True, importance=4, conciseness=None, accuracy=2, improvements=("a", "b"),
        )
