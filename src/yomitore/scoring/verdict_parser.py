"""
Verdict parsing

Extracts a structured Verdict from the evaluator's free-text answer.

The evaluator is asked to answer with one item per line:

    Appropriate: Yes
    Importance: 4
    Conciseness: 3
    Accuracy: 5
    Improvement 1: ...
    Improvement 2: ...
    Improvement 3: ...
    Overall: PASS

Parsing is best-effort and never raises: unrecognised lines are ignored, a
malformed line leaves its field absent. The pass/fail outcome is a plain
substring check for SUCCESS_MARKER anywhere in the text.
"""

from __future__ import annotations

import logging
import re

from yomitore.domain.constants import (
    FAILURE_VALUE,
    IMPROVEMENT_COUNT,
    SCORE_CRITERIA,
    SCORE_MAX,
    SCORE_MIN,
    SUCCESS_MARKER,
)
from yomitore.domain.value_objects import Verdict

logger = logging.getLogger(__name__)

# Leading list bullets, headings, quotes and emphasis
_LEADING_NOISE_RE = re.compile(r"^[\s\-*#>•]+")
_KEY_VALUE_RE = re.compile(r"^([A-Za-z][A-Za-z ]*?)\s*(\d?)\s*[:：]\s*(.*)$")
_INT_RE = re.compile(r"\d+")
_IMPROVEMENT_KEYS = {"improvement", "improvements", "suggestion"}

_YES = {"yes", "y", "true", "はい"}
_NO = {"no", "n", "false", "いいえ"}


def _split_line(line: str) -> tuple[str, str, str] | None:
    """Return (key, index, value) for a 'Key N: value' line, or None"""
    text = _LEADING_NOISE_RE.sub("", line).replace("**", "").replace("__", "").strip()
    m = _KEY_VALUE_RE.match(text)
    if not m:
        return None
    key = " ".join(m.group(1).lower().split())
    return key, m.group(2), m.group(3).strip()


def _parse_score(value: str) -> int | None:
    m = _INT_RE.search(value)
    if not m:
        return None
    number = int(m.group(0))
    if SCORE_MIN <= number <= SCORE_MAX:
        return number
    return None


def _parse_yes_no(value: str) -> bool | None:
    words = value.strip().lower().split()
    if not words:
        return None
    head = words[0].strip(".,!。")
    if head in _YES:
        return True
    if head in _NO:
        return False
    return None


def parse_verdict(raw_text: str) -> Verdict:
    """
    Parse evaluator output into a Verdict.

    Args:
        raw_text: The evaluator's answer, verbatim

    Returns:
        Verdict: worst case an all-absent Verdict with overall_pass=False
    """
    text = raw_text or ""
    overall_pass = SUCCESS_MARKER in text
    saw_failure = False
    scores: dict[str, int] = {}
    appropriate: bool | None = None
    improvements: dict[int, str] = {}

    for line in text.splitlines():
        parts = _split_line(line)
        if parts is None:
            continue
        key, index, value = parts

        if key in SCORE_CRITERIA:
            parsed = _parse_score(value)
            if parsed is not None:
                scores[key] = parsed
        elif key == "appropriate":
            appropriate = _parse_yes_no(value)
        elif key in _IMPROVEMENT_KEYS:
            slot = int(index) if index else len(improvements) + 1
            if 1 <= slot <= IMPROVEMENT_COUNT and value:
                improvements[slot] = value
        elif key == "overall":
            if value.upper().startswith(FAILURE_VALUE):
                saw_failure = True

    # A "PASS" that does not match the literal marker stays indeterminate
    determinate = overall_pass or saw_failure
    if not determinate:
        logger.info("Evaluator output has no overall result (%d chars)", len(text))

    return Verdict(
        overall_pass=overall_pass,
        raw_text=text,
        determinate=determinate,
        scores=tuple(scores.items()),
        appropriate=appropriate,
        improvements=tuple(improvements[k] for k in sorted(improvements)),
    )


def format_verdict(verdict: Verdict) -> str:
    """Render a Verdict as display text for the overlay"""
    if not verdict.determinate:
        headline = "Result: UNDETERMINED (not recorded)"
    elif verdict.overall_pass:
        headline = "Result: PASS"
    else:
        headline = "Result: FAIL"

    lines = [headline, ""]
    if verdict.appropriate is not None:
        lines.append(f"Appropriate: {'yes' if verdict.appropriate else 'no'}")
    for criterion in SCORE_CRITERIA:
        value = verdict.score(criterion)
        shown = f"{value}/{SCORE_MAX}" if value is not None else "-"
        lines.append(f"{criterion.capitalize()}: {shown}")
    if verdict.improvements:
        lines.append("")
        lines.append("Improvements:")
        for i, item in enumerate(verdict.improvements, start=1):
            lines.append(f"  {i}. {item}")
    lines.append("")
    lines.append("--- Evaluator output ---")
    lines.append(verdict.raw_text.strip())
    return "\n".join(lines)
