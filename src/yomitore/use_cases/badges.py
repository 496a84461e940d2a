"""
Badge Engine

Derives the current streak and the earned badges from a result history.
Everything here is a pure function of its arguments: the history is the only
persisted fact, streak and badges are recomputed from it on load and after
every append.
"""

from __future__ import annotations

from yomitore.domain.constants import (
    BADGE_INTERVAL,
    CUMULATIVE_BADGE_CAP,
    STREAK_BADGE_CAP,
)
from yomitore.domain.entities import Badge, BadgeKind, ResultHistory
from yomitore.domain.value_objects import BadgeReport


def current_streak(history: ResultHistory) -> int:
    """Count trailing consecutive passes (0 if the last result failed or there is none)"""
    streak = 0
    for result in reversed(history.results):
        if not result.passed:
            break
        streak += 1
    return streak


def recompute(
    history: ResultHistory,
    interval: int = BADGE_INTERVAL,
    streak_cap: int = STREAK_BADGE_CAP,
    cumulative_cap: int = CUMULATIVE_BADGE_CAP,
) -> BadgeReport:
    """
    Recompute streak and badges from scratch.

    The history is scanned in chronological order. A streak badge is earned for
    every multiple of `interval` the running streak reaches (the running streak
    resets on each failure), a cumulative badge for every multiple the total
    pass count reaches. Each badge is awarded once, stamped with the result
    that first reached it, so later failures never revoke anything.

    Args:
        history: Result history
        interval: Badge interval
        streak_cap: Highest streak badge awarded
        cumulative_cap: Highest cumulative badge awarded

    Returns:
        BadgeReport: streak, badges in the order they were earned, total passes

    Raises:
        ValueError: If interval is less than 1
    """
    if interval < 1:
        raise ValueError("interval must be at least 1.")

    badges: list[Badge] = []
    earned: set[tuple[BadgeKind, int]] = set()
    running = 0
    total = 0

    for result in history:
        if not result.passed:
            running = 0
            continue
        running += 1
        total += 1

        if running % interval == 0 and running <= streak_cap:
            key = (BadgeKind.CONSECUTIVE_STREAK, running)
            if key not in earned:
                earned.add(key)
                badges.append(Badge(BadgeKind.CONSECUTIVE_STREAK, running, result.timestamp))

        if total % interval == 0 and total <= cumulative_cap:
            key = (BadgeKind.CUMULATIVE_MILESTONE, total)
            if key not in earned:
                earned.add(key)
                badges.append(Badge(BadgeKind.CUMULATIVE_MILESTONE, total, result.timestamp))

    return BadgeReport(
        streak=current_streak(history),
        badges=tuple(badges),
        total_passed=total,
    )


def badges_by_kind(badges: tuple[Badge, ...] | list[Badge]) -> tuple[list[Badge], list[Badge]]:
    """Split badges into (streak badges, cumulative badges), each sorted by threshold"""
    streak = sorted(
        (b for b in badges if b.kind is BadgeKind.CONSECUTIVE_STREAK),
        key=lambda b: b.threshold,
    )
    cumulative = sorted(
        (b for b in badges if b.kind is BadgeKind.CUMULATIVE_MILESTONE),
        key=lambda b: b.threshold,
    )
    return streak, cumulative
