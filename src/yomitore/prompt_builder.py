"""
Prompt Builder

Builds the passage-generation and summary-evaluation prompts.

The evaluation prompt pins down the line format understood by
yomitore.scoring.verdict_parser; the wording around it is free to change.
"""

from yomitore.domain.constants import (
    FAILURE_VALUE,
    IMPROVEMENT_COUNT,
    SCORE_CRITERIA,
    SCORE_MAX,
    SCORE_MIN,
    SUCCESS_MARKER,
)

EVALUATION_HEADER = "You are grading a reading-comprehension exercise."

GENERATION_TOPICS_HINT = (
    "science, history, economics, culture, technology, nature or everyday life"
)


def build_generation_prompt(length: int) -> str:
    """
    Prompt for a reading passage of roughly `length` characters

    Args:
        length: Requested passage length in characters

    Returns:
        Prompt string
    """
    parts = [
        "Write one self-contained expository passage for reading-comprehension practice.",
        f"Length: about {length} characters.",
        f"Pick a topic from {GENERATION_TOPICS_HINT}.",
        "The passage must have a clear main point and a few supporting details "
        "so that it can be summarized.",
        "Output only the passage text: no title, no headings, no commentary.",
    ]
    return "\n".join(parts)


def build_evaluation_prompt(original: str, summary: str) -> str:
    """
    Prompt asking the evaluator to grade a summary in the fixed line format

    Args:
        original: The passage that was summarized
        summary: The user's summary

    Returns:
        Prompt string
    """
    score_lines = [
        f"{criterion.capitalize()}: <integer {SCORE_MIN}-{SCORE_MAX}>"
        for criterion in SCORE_CRITERIA
    ]
    improvement_lines = [
        f"Improvement {i}: <one concrete suggestion>" for i in range(1, IMPROVEMENT_COUNT + 1)
    ]
    pass_value = SUCCESS_MARKER.split(":", 1)[1].strip()

    parts = [
        EVALUATION_HEADER,
        "Decide whether the SUMMARY adequately summarizes the ORIGINAL.",
        "",
        "Answer using exactly these lines, in this order:",
        "Appropriate: <Yes or No>",
        *score_lines,
        *improvement_lines,
        f"Overall: <{pass_value} or {FAILURE_VALUE}>",
        "",
        "After those lines you may add a short explanation.",
        "",
        f"# ORIGINAL\n{original}",
        "",
        f"# SUMMARY\n{summary}",
    ]
    return "\n".join(parts)
