"""Tests for the rich renderer"""

from datetime import date, datetime, timedelta

import pytest
from rich.console import Console

from yomitore.domain.entities import EvaluationScores, ResultHistory, TrainingResult
from yomitore.infrastructure.model_clients.fixed import DEFAULT_VERDICT
from yomitore.scoring.verdict_parser import parse_verdict
from yomitore.session.controller import ViewMode, ViewModel
from yomitore.session.layout import max_scroll, pane_width, training_pane_height, wrap_lines, wrap_with_cursor
from yomitore.session.operations import OperationKind
from yomitore.tui.render import render_report, render_view
from yomitore.use_cases.badges import recompute

NOW = datetime(2026, 3, 29, 12, 0)
WIDTH = 100
LONG_PASSAGE = " ".join(f"w{i:03d}" for i in range(400))


def render_text(renderable) -> str:
    console = Console(record=True, width=WIDTH, color_system=None)
    console.print(renderable)
    return console.export_text()


def view_model(**overrides) -> ViewModel:
    values = dict(
        view=ViewMode.MENU,
        base_view=ViewMode.MENU,
        width=WIDTH,
        height=24,
        length_options=(200, 400, 800),
        selected_index=1,
        passage="",
        passage_scroll=0,
        buffer_text="",
        buffer_cursor=(0, 0),
        editing=False,
        awaiting=None,
        verdict=None,
        show_verdict=False,
        verdict_scroll=0,
        status=None,
        streak=0,
        badges=(),
        history=ResultHistory(),
        help_scroll=0,
    )
    values.update(overrides)
    if "buffer_lines" not in overrides:
        lines, cursor = wrap_with_cursor(values["buffer_text"], values["buffer_cursor"], pane_width(WIDTH))
        values["buffer_lines"] = tuple(lines)
        values["buffer_display_cursor"] = cursor
    return ViewModel(**values)


@pytest.fixture
def history():
    return ResultHistory(
        TrainingResult(NOW - timedelta(hours=i), True, EvaluationScores(importance=4, accuracy=3))
        for i in range(5, 0, -1)
    )


class TestMenu:
    def test_lengths_and_selection(self):
        text = render_text(render_view(view_model()))
        assert "> 400 characters" in text
        assert "200 characters" in text
        assert "Streak: 0" in text


class TestTraining:
    def test_passage_and_summary(self):
        vm = view_model(view=ViewMode.TRAINING, passage="The [bold] passage.", buffer_text="my summary")
        text = render_text(render_view(vm))
        assert "The [bold] passage." in text
        assert "my summary" in text

    def test_generating(self):
        vm = view_model(view=ViewMode.TRAINING, awaiting=OperationKind.GENERATING)
        assert "Generating" in render_text(render_view(vm))

    def test_evaluating_status(self):
        vm = view_model(view=ViewMode.TRAINING, passage="p", awaiting=OperationKind.EVALUATING)
        assert "Evaluating summary" in render_text(render_view(vm))

    def test_editing_shows_cursor_panel(self):
        vm = view_model(view=ViewMode.TRAINING, passage="p", buffer_text="ab\ncd",
                        buffer_cursor=(1, 2), editing=True)
        text = render_text(render_view(vm))
        assert "Summary (editing)" in text
        assert "Ctrl+S" in text

    def test_verdict_overlay(self):
        vm = view_model(view=ViewMode.TRAINING, passage="p",
                        verdict=parse_verdict(DEFAULT_VERDICT), show_verdict=True, height=60)
        text = render_text(render_view(vm))
        assert "Result: PASS" in text
        assert "Accuracy: 5/5" in text

    def test_long_paragraph_is_wrapped_to_pane_height(self):
        vm = view_model(view=ViewMode.TRAINING, passage=LONG_PASSAGE)
        text = render_text(render_view(vm))
        assert "w000" in text
        assert "w399" not in text

    def test_long_paragraph_scrolled_to_end(self):
        lines = wrap_lines(LONG_PASSAGE, pane_width(WIDTH))
        bottom = max_scroll(lines, training_pane_height(24))
        assert bottom > 0
        vm = view_model(view=ViewMode.TRAINING, passage=LONG_PASSAGE, passage_scroll=bottom)
        text = render_text(render_view(vm))
        assert "w399" in text
        assert "w000" not in text

    def test_editing_keeps_cursor_line_visible(self):
        summary = " ".join(f"s{i:03d}" for i in range(400))
        vm = view_model(view=ViewMode.TRAINING, passage="p", buffer_text=summary,
                        buffer_cursor=(0, len(summary)), editing=True)
        text = render_text(render_view(vm))
        assert "s399" in text
        assert "s000" not in text

    def test_status_message(self):
        vm = view_model(view=ViewMode.TRAINING, passage="p", status="Evaluation failed: timed out after 60s.")
        assert "timed out" in render_text(render_view(vm))


class TestHelp:
    def test_help_scrolls(self):
        top = render_text(render_view(view_model(view=ViewMode.HELP)))
        scrolled = render_text(render_view(view_model(view=ViewMode.HELP, help_scroll=3)))
        assert "reading comprehension trainer" in top
        assert "reading comprehension trainer" not in scrolled


class TestReport:
    def test_report_contents(self, history):
        report = recompute(history)
        text = render_text(render_report(history, report.streak, report.badges, today=NOW.date(), now=NOW))
        assert "Current streak: 5" in text
        assert "5 streak" in text
        assert "5 total" in text
        assert "Last 30 days" in text
        assert "this week" in text
        assert "Importance" in text
        assert "4.00" in text

    def test_empty_report(self):
        text = render_text(render_report(ResultHistory(), 0, (), today=date(2026, 3, 29), now=NOW))
        assert "(none yet)" in text
        assert "0 results" in text

    def test_report_view(self, history):
        report = recompute(history)
        vm = view_model(view=ViewMode.REPORT, history=history, streak=report.streak, badges=report.badges)
        assert "Report" in render_text(render_view(vm))
