"""
Scoring sub-package

Turns evaluator output into structured verdicts.
"""

from yomitore.domain.value_objects import Verdict
from yomitore.scoring.verdict_parser import format_verdict, parse_verdict

__all__ = [
    "Verdict",
    "format_verdict",
    "parse_verdict",
]
