"""Tests for domain constants"""

from yomitore.domain.constants import (
    BADGE_INTERVAL,
    CUMULATIVE_BADGE_CAP,
    DEFAULT_BASE_URL,
    EVENT_POLL_INTERVAL_MS,
    LENGTH_OPTIONS,
    SCORE_CRITERIA,
    STREAK_BADGE_CAP,
    SUCCESS_MARKER,
)


class TestConstants:
    def test_length_options(self):
        assert LENGTH_OPTIONS == [200, 400, 800]

    def test_success_marker(self):
        assert SUCCESS_MARKER == "Overall: PASS"

    def test_badge_caps_are_multiples_of_interval(self):
        assert STREAK_BADGE_CAP % BADGE_INTERVAL == 0
        assert CUMULATIVE_BADGE_CAP % BADGE_INTERVAL == 0
        assert STREAK_BADGE_CAP // BADGE_INTERVAL == 10
        assert CUMULATIVE_BADGE_CAP // BADGE_INTERVAL == 20

    def test_score_criteria(self):
        assert SCORE_CRITERIA == ("importance", "conciseness", "accuracy")

    def test_poll_interval(self):
        assert EVENT_POLL_INTERVAL_MS == 100

    def test_default_endpoint_is_openai_compatible(self):
        assert DEFAULT_BASE_URL.endswith("/openai/v1")
