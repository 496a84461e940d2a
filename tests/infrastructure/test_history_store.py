"""Tests for the JSON history store"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from yomitore.domain.entities import EvaluationScores, ResultHistory, TrainingResult
from yomitore.errors import PersistenceFailure
from yomitore.infrastructure.history_store import HistoryStore, parse_timestamp
from yomitore.use_cases.badges import recompute

JST = timezone(timedelta(hours=9))


def sample_history() -> ResultHistory:
    return ResultHistory([
        TrainingResult(
            datetime(2026, 3, 1, 9, 0, tzinfo=JST),
            True,
            EvaluationScores(appropriate=True, importance=4, conciseness=3, accuracy=5,
                             improvements=("one", "two", "three")),
        ),
        TrainingResult(datetime(2026, 3, 1, 9, 30, tzinfo=JST), False),
    ])


class TestParseTimestamp:
    def test_nanosecond_fraction(self):
        ts = parse_timestamp("2025-10-30T21:15:42.123456789+09:00")
        assert ts.microsecond == 123456
        assert ts.utcoffset() == timedelta(hours=9)

    def test_z_suffix(self):
        ts = parse_timestamp("2025-10-30T12:00:00Z")
        assert ts.utcoffset() == timedelta(0)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


class TestLoadHistory:
    def test_missing_file_is_empty(self, tmp_path):
        history = HistoryStore(tmp_path / "stats.json").load_history()
        assert len(history) == 0

    def test_round_trip(self, tmp_path):
        store = HistoryStore(tmp_path / "stats.json")
        history = sample_history()
        store.save_history(history)
        assert store.load_history() == history

    def test_reads_existing_file_format(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({
            "results": [
                {
                    "timestamp": "2025-10-30T21:15:42.123456789+09:00",
                    "passed": True,
                    "evaluation": {
                        "appropriate": True,
                        "importance": 4,
                        "conciseness": 4,
                        "accuracy": 5,
                        "improvement1": "a",
                        "improvement2": "b",
                        "improvement3": "",
                        "overall_passed": True,
                    },
                },
                {"timestamp": "2025-10-31T08:00:00+09:00", "passed": False},
            ],
            "badges": [],
            "current_streak": 99,
        }), encoding="utf-8")

        history = HistoryStore(path).load_history()
        assert len(history) == 2
        first = history.results[0]
        assert first.passed is True
        assert first.evaluation.importance == 4
        assert first.evaluation.improvements == ("a", "b")
        assert history.results[1].evaluation is None
        # current_streak in the file is ignored
        assert recompute(history).streak == 0

    def test_malformed_entries_omitted(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({"results": [
            {"timestamp": "2025-10-30T21:15:42+09:00", "passed": True},
            {"timestamp": "not a time", "passed": True},
            {"timestamp": "2025-10-30T21:16:00+09:00", "passed": "yes"},
            {"passed": False},
            "garbage",
            {"timestamp": "2025-10-30T21:17:00+09:00", "passed": False},
        ]}), encoding="utf-8")

        store = HistoryStore(path)
        history = store.load_history()
        assert [r.passed for r in history] == [True, False]
        assert store.skipped_entries == 4

    def test_malformed_evaluation_keeps_result(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({"results": [
            {"timestamp": "2025-10-30T21:15:42+09:00", "passed": True, "evaluation": "oops"},
        ]}), encoding="utf-8")
        history = HistoryStore(path).load_history()
        assert len(history) == 1
        assert history.results[0].evaluation is None

    def test_corrupt_file_is_backed_up(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(PersistenceFailure):
            HistoryStore(path).load_history()

        backups = list(tmp_path.glob("stats.json.*.bak"))
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8") == "{not json"
        assert path.read_text(encoding="utf-8") == "{not json"

    def test_invalid_utf8_is_backed_up(self, tmp_path):
        path = tmp_path / "stats.json"
        raw = b'{"results": [\xff\xfe]}'
        path.write_bytes(raw)

        with pytest.raises(PersistenceFailure):
            HistoryStore(path).load_history()

        backups = list(tmp_path.glob("stats.json.*.bak"))
        assert len(backups) == 1
        assert backups[0].read_bytes() == raw
        assert path.read_bytes() == raw

    def test_unexpected_layout(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({"results": "nope"}), encoding="utf-8")
        with pytest.raises(PersistenceFailure):
            HistoryStore(path).load_history()


class TestSaveHistory:
    def test_writes_results_badges_and_streak(self, tmp_path):
        store = HistoryStore(tmp_path / "stats.json")
        history = ResultHistory(
            TrainingResult(datetime(2026, 3, 1, 9, i, tzinfo=JST), True) for i in range(5)
        )
        store.save_history(history, recompute(history))

        data = json.loads((tmp_path / "stats.json").read_text(encoding="utf-8"))
        assert len(data["results"]) == 5
        assert data["results"][0]["evaluation"] is None
        assert data["current_streak"] == 5
        assert {"badge_type": {"ConsecutiveStreak": 5}, "earned_at": "2026-03-01T09:04:00+09:00"} in data["badges"]
        assert {"badge_type": {"CumulativeMilestone": 5}, "earned_at": "2026-03-01T09:04:00+09:00"} in data["badges"]

    def test_evaluation_fields(self, tmp_path):
        store = HistoryStore(tmp_path / "stats.json")
        store.save_history(sample_history())
        data = json.loads((tmp_path / "stats.json").read_text(encoding="utf-8"))
        evaluation = data["results"][0]["evaluation"]
        assert evaluation["improvement1"] == "one"
        assert evaluation["improvement3"] == "three"
        assert evaluation["overall_passed"] is True

    def test_creates_parent_directory(self, tmp_path):
        store = HistoryStore(tmp_path / "nested" / "dir" / "stats.json")
        store.save_history(sample_history())
        assert (tmp_path / "nested" / "dir" / "stats.json").exists()

    def test_no_temp_files_left_behind(self, tmp_path):
        store = HistoryStore(tmp_path / "stats.json")
        store.save_history(sample_history())
        store.save_history(sample_history())
        assert [p.name for p in tmp_path.iterdir()] == ["stats.json"]

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        store = HistoryStore(blocker / "stats.json")
        with pytest.raises(PersistenceFailure):
            store.save_history(sample_history())
