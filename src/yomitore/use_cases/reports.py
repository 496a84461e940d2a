"""
Reports

Aggregates the result history for the report view and the `stats` command:
daily pass/fail counts, rolling weekly counts and evaluator sub-score
statistics.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pandas as pd

from yomitore.domain.constants import SCORE_CRITERIA
from yomitore.domain.entities import ResultHistory, WeeklyStats
from yomitore.domain.value_objects import ScoreStats, ScoreSummary

DAYS_IN_MONTH = 30
WEEKS_TO_SHOW = 4


def _to_local_naive(ts: datetime) -> datetime:
    """Express a timestamp as naive local time (naive input is taken as local)"""
    return ts.astimezone().replace(tzinfo=None)


def history_frame(history: ResultHistory) -> pd.DataFrame:
    """
    Convert a history into a DataFrame.

    Returns:
        DataFrame with columns: timestamp (naive local), date, passed
    """
    rows = [
        {"timestamp": _to_local_naive(r.timestamp), "passed": bool(r.passed)}
        for r in history
    ]
    df = pd.DataFrame(rows, columns=["timestamp", "passed"])
    df["date"] = [ts.date() for ts in df["timestamp"]]
    return df


def daily_stats(
    history: ResultHistory,
    days: int = DAYS_IN_MONTH,
    today: date | None = None,
) -> pd.DataFrame:
    """
    Pass/fail counts per day for the last `days` days.

    Args:
        history: Result history
        days: Window length in days (ending today, inclusive)
        today: Reference date (default: local today)

    Returns:
        DataFrame indexed by date (oldest first) with int columns
        correct, incorrect, total. Days without results are present with zeros.
    """
    if today is None:
        today = datetime.now().date()
    dates = [today - timedelta(days=i) for i in range(days - 1, -1, -1)]

    df = history_frame(history)
    if df.empty:
        frame = pd.DataFrame({"correct": 0, "incorrect": 0}, index=pd.Index(dates))
    else:
        counts = (
            df.assign(
                correct=df["passed"].astype(int),
                incorrect=(~df["passed"].astype(bool)).astype(int),
            )
            .groupby("date")[["correct", "incorrect"]]
            .sum()
        )
        frame = counts.reindex(dates, fill_value=0)

    frame.index.name = "date"
    frame["total"] = frame["correct"] + frame["incorrect"]
    return frame.astype(int)


def weekly_stats(
    history: ResultHistory,
    weeks: int = WEEKS_TO_SHOW,
    now: datetime | None = None,
) -> list[WeeklyStats]:
    """
    Pass/fail counts for rolling 7-day windows ending at `now`.

    Window i (1 = oldest) covers (now - (weeks-i+1) weeks, now - (weeks-i) weeks].

    Args:
        history: Result history
        weeks: Number of windows
        now: Reference time (default: current local time)

    Returns:
        list[WeeklyStats]: oldest window first
    """
    end = _to_local_naive(now) if now is not None else datetime.now()
    df = history_frame(history)

    stats = []
    for week_number in range(1, weeks + 1):
        window_end = end - timedelta(weeks=weeks - week_number)
        window_start = window_end - timedelta(weeks=1)
        if df.empty:
            correct = incorrect = 0
        else:
            in_window = df[(df["timestamp"] > window_start) & (df["timestamp"] <= window_end)]
            correct = int(in_window["passed"].sum())
            incorrect = int(len(in_window) - correct)
        stats.append(WeeklyStats(week_number=week_number, correct=correct, incorrect=incorrect))
    return stats


def score_summary(history: ResultHistory) -> ScoreSummary:
    """
    Average and median of each evaluator criterion over recorded results.

    Results recorded without sub-scores are skipped; a criterion with no values
    maps to None.
    """
    rows = [
        {criterion: r.evaluation.score(criterion) for criterion in SCORE_CRITERIA}
        for r in history
        if r.evaluation is not None
    ]
    df = pd.DataFrame(rows, columns=list(SCORE_CRITERIA), dtype="float")

    criteria: dict[str, ScoreStats | None] = {}
    for criterion in SCORE_CRITERIA:
        values = df[criterion].dropna()
        if values.empty:
            criteria[criterion] = None
        else:
            criteria[criterion] = ScoreStats(
                average=float(values.mean()),
                median=float(values.median()),
            )
    return ScoreSummary(count=len(rows), criteria=criteria)
