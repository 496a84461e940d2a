"""
History Store

Persists the result history as JSON.

File layout (compatible with earlier stats.json files):

    {
      "results": [{"timestamp": "...", "passed": true, "evaluation": {...} | null}],
      "badges": [{"badge_type": {"ConsecutiveStreak": 5}, "earned_at": "..."}],
      "current_streak": 3
    }

Only "results" is read back. "badges" and "current_streak" are written for
people inspecting the file; they are recomputed from the results on load.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path

from yomitore.domain.entities import (
    Badge,
    BadgeKind,
    EvaluationScores,
    ResultHistory,
    TrainingResult,
)
from yomitore.domain.value_objects import BadgeReport
from yomitore.errors import PersistenceFailure

logger = logging.getLogger(__name__)

_BADGE_TYPE_NAMES = {
    BadgeKind.CONSECUTIVE_STREAK: "ConsecutiveStreak",
    BadgeKind.CUMULATIVE_MILESTONE: "CumulativeMilestone",
}
# Sub-second digits beyond microseconds (nanosecond timestamps)
_EXTRA_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 / RFC 3339 timestamp, tolerating nanoseconds and 'Z'"""
    text = _EXTRA_FRACTION_RE.sub(r"\1", value.strip())
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _optional_score(value) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _evaluation_from_dict(raw) -> EvaluationScores | None:
    if not isinstance(raw, dict):
        return None
    appropriate = raw.get("appropriate")
    improvements = tuple(
        str(raw[key]) for key in ("improvement1", "improvement2", "improvement3")
        if isinstance(raw.get(key), str) and raw[key].strip()
    )
    return EvaluationScores(
        appropriate=appropriate if isinstance(appropriate, bool) else None,
        importance=_optional_score(raw.get("importance")),
        conciseness=_optional_score(raw.get("conciseness")),
        accuracy=_optional_score(raw.get("accuracy")),
        improvements=improvements,
    )


def _evaluation_to_dict(evaluation: EvaluationScores, passed: bool) -> dict:
    data: dict = {
        "appropriate": evaluation.appropriate,
        "importance": evaluation.importance,
        "conciseness": evaluation.conciseness,
        "accuracy": evaluation.accuracy,
    }
    for i in range(3):
        data[f"improvement{i + 1}"] = evaluation.improvements[i] if i < len(evaluation.improvements) else ""
    data["overall_passed"] = passed
    return data


def result_from_dict(raw) -> TrainingResult | None:
    """Build a TrainingResult from stored data, or None if the entry is malformed"""
    if not isinstance(raw, dict):
        return None
    passed = raw.get("passed")
    timestamp = raw.get("timestamp")
    if not isinstance(passed, bool) or not isinstance(timestamp, str):
        return None
    try:
        parsed = parse_timestamp(timestamp)
    except ValueError:
        return None
    return TrainingResult(
        timestamp=parsed,
        passed=passed,
        evaluation=_evaluation_from_dict(raw.get("evaluation")),
    )


def result_to_dict(result: TrainingResult) -> dict:
    return {
        "timestamp": result.timestamp.isoformat(),
        "passed": result.passed,
        "evaluation": (
            _evaluation_to_dict(result.evaluation, result.passed)
            if result.evaluation is not None
            else None
        ),
    }


def badge_to_dict(badge: Badge) -> dict:
    return {
        "badge_type": {_BADGE_TYPE_NAMES[badge.kind]: badge.threshold},
        "earned_at": badge.earned_at.isoformat(),
    }


class HistoryStore:
    """load_history / save_history against one JSON file"""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.skipped_entries = 0

    def load_history(self) -> ResultHistory:
        """
        Load the result history.

        A missing file is an empty history. Malformed entries are omitted.

        Returns:
            ResultHistory

        Raises:
            PersistenceFailure: If the file exists but cannot be read or parsed.
                An unparseable file is copied aside first so a later save does
                not destroy it.
        """
        self.skipped_entries = 0
        if not self.path.exists():
            return ResultHistory()

        try:
            data = self.path.read_bytes()
        except OSError as e:
            raise PersistenceFailure(f"Could not read {self.path}: {e}") from e

        try:
            raw = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            backup = self._backup(data)
            raise PersistenceFailure(f"Could not parse {self.path} (copied to {backup}): {e}") from e

        entries = raw.get("results", []) if isinstance(raw, dict) else None
        if not isinstance(entries, list):
            backup = self._backup(data)
            raise PersistenceFailure(f"Unexpected layout in {self.path} (copied to {backup})")

        results = []
        for entry in entries:
            result = result_from_dict(entry)
            if result is None:
                self.skipped_entries += 1
                continue
            results.append(result)

        if self.skipped_entries:
            logger.warning("Skipped %d malformed history entries in %s", self.skipped_entries, self.path)
        logger.info("Loaded %d results from %s", len(results), self.path)
        return ResultHistory(results)

    def save_history(self, history: ResultHistory, report: BadgeReport | None = None) -> None:
        """
        Write the history (and, for readability, the derived badges and streak).

        The file is replaced atomically.

        Raises:
            PersistenceFailure: If the file cannot be written
        """
        payload: dict = {"results": [result_to_dict(r) for r in history]}
        if report is not None:
            payload["badges"] = [badge_to_dict(b) for b in report.badges]
            payload["current_streak"] = report.streak

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".stats-", suffix=".json", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceFailure(f"Could not save {self.path}: {e}") from e
        logger.debug("Saved %d results to %s", len(history), self.path)

    def _backup(self, data: bytes) -> Path | None:
        backup = self.path.with_name(f"{self.path.name}.{datetime.now():%Y%m%d_%H%M%S}.bak")
        try:
            backup.write_bytes(data)
        except OSError as e:
            logger.error("Could not back up unreadable history %s: %s", self.path, e)
            return None
        return backup
