"""
prompt_builder.py tests
"""

from yomitore.prompt_builder import (
    EVALUATION_HEADER,
    build_evaluation_prompt,
    build_generation_prompt,
)
from yomitore.scoring.verdict_parser import parse_verdict


class TestBuildGenerationPrompt:
    def test_mentions_length(self):
        assert "about 800 characters" in build_generation_prompt(800)

    def test_not_an_evaluation_prompt(self):
        assert not build_generation_prompt(200).startswith(EVALUATION_HEADER)


class TestBuildEvaluationPrompt:
    def test_starts_with_header(self):
        assert build_evaluation_prompt("o", "s").startswith(EVALUATION_HEADER)

    def test_contains_both_texts_in_order(self):
        prompt = build_evaluation_prompt("ORIGINAL TEXT", "SUMMARY TEXT")
        assert prompt.index("ORIGINAL TEXT") < prompt.index("SUMMARY TEXT")

    def test_requests_parseable_line_format(self):
        prompt = build_evaluation_prompt("o", "s")
        for line in ("Appropriate:", "Importance:", "Conciseness:", "Accuracy:",
                     "Improvement 1:", "Improvement 3:", "Overall: <PASS or FAIL>"):
            assert line in prompt

    def test_prompt_itself_does_not_pass(self):
        # The template must not contain the success marker verbatim
        assert parse_verdict(build_evaluation_prompt("o", "s")).overall_pass is False
