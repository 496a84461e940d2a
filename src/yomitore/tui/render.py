"""
Renderer

Turns a ViewModel into rich renderables. Layout and colours are cosmetic; the
only contract is that every view shows the state the controller exposes.
"""

from __future__ import annotations

from datetime import date, datetime

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from yomitore.domain.constants import SCORE_CRITERIA
from yomitore.domain.entities import Badge, ResultHistory
from yomitore.scoring.verdict_parser import format_verdict
from yomitore.session.controller import ViewMode, ViewModel
from yomitore.session.layout import (
    clamp_scroll,
    help_pane_height,
    pane_width,
    training_pane_height,
    wrap_lines,
)
from yomitore.session.operations import OperationKind
from yomitore.tui.help import HELP_LINES
from yomitore.use_cases.badges import badges_by_kind
from yomitore.use_cases.reports import daily_stats, score_summary, weekly_stats

GRID_COLUMNS = 10
BAR_WIDTH = 30

_FOOTERS = {
    ViewMode.MENU: "j/k: select  Enter: start  r: report  h: help  q: quit",
    ViewMode.REPORT: "r/Esc: close  q: quit",
    ViewMode.HELP: "j/k PgUp/PgDn: scroll  h/Esc: close  q: quit",
}


def render_view(vm: ViewModel) -> RenderableType:
    """Render whichever view is on top of the view stack"""
    if vm.view is ViewMode.MENU:
        body = render_menu(vm)
    elif vm.view is ViewMode.TRAINING:
        body = render_training(vm)
    elif vm.view is ViewMode.REPORT:
        body = render_report(vm.history, vm.streak, vm.badges)
    else:
        body = render_help(vm)
    return Group(body, _status_line(vm), Text(_footer(vm), style="dim"))


def _footer(vm: ViewModel) -> str:
    if vm.view is not ViewMode.TRAINING:
        return _FOOTERS[vm.view]
    if vm.editing:
        return "Ctrl+S: submit  Esc: stop editing"
    return "i: write  j/k PgUp/PgDn: scroll  e: verdict  n: next  m: menu  r: report  h: help  q: quit"


def _status_line(vm: ViewModel) -> Text:
    if vm.awaiting is OperationKind.GENERATING:
        return Text("Generating passage...", style="yellow")
    if vm.awaiting is OperationKind.EVALUATING:
        return Text("Evaluating summary...", style="yellow")
    if vm.status:
        style = "red" if vm.status.lower().startswith(("warning", "could not", "evaluation failed")) else "cyan"
        return Text(vm.status, style=style)
    return Text("")


def render_menu(vm: ViewModel) -> RenderableType:
    lines = Text()
    lines.append("Choose a passage length\n\n", style="bold")
    for i, length in enumerate(vm.length_options):
        if i == vm.selected_index:
            lines.append(f"> {length} characters\n", style="bold green")
        else:
            lines.append(f"  {length} characters\n")
    lines.append(f"\n🔥 Streak: {vm.streak}   ✅ Passed: {vm.history.passed_count()}")
    if vm.badges:
        lines.append("\n" + " ".join(b.icon for b in vm.badges))
    return Panel(lines, title="yomitore", border_style="cyan")


def _scrolled(lines: list[str], offset: int, height: int) -> Text:
    offset = clamp_scroll(offset, lines, height)
    return Text("\n".join(lines[offset:offset + height]))


def _buffer_text(vm: ViewModel, height: int) -> Text:
    lines = list(vm.buffer_lines)
    if not vm.editing:
        if vm.buffer_text:
            return _scrolled(lines, 0, height)
        return Text("(press i to write your summary)", style="dim")

    # Show the lines around the cursor
    row, col = vm.buffer_display_cursor
    top = max(0, row - height + 1)
    text = Text()
    for i, line in enumerate(lines[top:top + height], start=top):
        if i > top:
            text.append("\n")
        if i == row:
            text.append(line[:col])
            text.append(line[col:col + 1] or " ", style="reverse")
            text.append(line[col + 1:])
        else:
            text.append(line)
    return text


def render_training(vm: ViewModel) -> RenderableType:
    pane_height = training_pane_height(vm.height)
    width = pane_width(vm.width)

    if vm.show_verdict and vm.verdict is not None:
        verdict_lines = wrap_lines(format_verdict(vm.verdict), width)
        if not vm.verdict.determinate:
            style = "yellow"
        else:
            style = "green" if vm.verdict.overall_pass else "red"
        top = Panel(
            _scrolled(verdict_lines, vm.verdict_scroll, pane_height),
            title="Verdict (e: hide, J/K: scroll)",
            border_style=style,
        )
    elif vm.awaiting is OperationKind.GENERATING:
        top = Panel(Text("Generating...", style="dim"), title="Passage")
    elif not vm.passage:
        top = Panel(Text("No passage. Press n to try again.", style="dim"), title="Passage")
    else:
        top = Panel(_scrolled(wrap_lines(vm.passage, width), vm.passage_scroll, pane_height), title="Passage")

    title = "Summary (editing)" if vm.editing else "Summary"
    bottom = Panel(_buffer_text(vm, pane_height), title=title, border_style="green" if vm.editing else "white")
    return Group(top, bottom)


def render_help(vm: ViewModel) -> RenderableType:
    return Panel(
        _scrolled(HELP_LINES, vm.help_scroll, help_pane_height(vm.height)),
        title="Help",
        border_style="cyan",
    )


def _badge_line(badges: list[Badge]) -> str:
    if not badges:
        return "(none yet)"
    return "  ".join(f"{b.icon} {b.display_text}" for b in badges)


def _daily_grid(history: ResultHistory, today: date | None) -> Text:
    frame = daily_stats(history, today=today)
    grid = Text()
    for i, (_day, row) in enumerate(frame.iterrows()):
        if row["total"] == 0:
            grid.append("· ", style="dim")
        elif row["incorrect"] == 0:
            grid.append("● ", style="green")
        elif row["correct"] == 0:
            grid.append("● ", style="red")
        else:
            grid.append("● ", style="yellow")
        if (i + 1) % GRID_COLUMNS == 0:
            grid.append("\n")
    grid.append("● all passed  ", style="green")
    grid.append("● mixed  ", style="yellow")
    grid.append("● all failed  ", style="red")
    grid.append("· none", style="dim")
    return grid


def _weekly_bars(history: ResultHistory, now: datetime | None) -> Text:
    weeks = weekly_stats(history, now=now)
    peak = max((w.total for w in weeks), default=0)
    bars = Text()
    for w in weeks:
        label = "this week" if w.week_number == len(weeks) else f"{len(weeks) - w.week_number} week(s) ago"
        bars.append(f"{label:>14} ")
        if peak:
            bars.append("█" * round(BAR_WIDTH * w.correct / peak), style="green")
            bars.append("█" * round(BAR_WIDTH * w.incorrect / peak), style="red")
        bars.append(f" {w.correct}/{w.total}\n")
    return bars


def _score_table(history: ResultHistory) -> Table:
    summary = score_summary(history)
    table = Table(title=f"Evaluator scores ({summary.count} results)", show_lines=False)
    table.add_column("Criterion", style="cyan")
    table.add_column("Average", justify="right")
    table.add_column("Median", justify="right")
    for criterion in SCORE_CRITERIA:
        stats = summary.criteria.get(criterion)
        if stats is None:
            table.add_row(criterion.capitalize(), "-", "-")
        else:
            table.add_row(criterion.capitalize(), f"{stats.average:.2f}", f"{stats.median:.1f}")
    return table


def render_report(
    history: ResultHistory,
    streak: int,
    badges: tuple[Badge, ...] | list[Badge],
    today: date | None = None,
    now: datetime | None = None,
) -> RenderableType:
    """
    Render the statistics report.

    Used by the report view and by the `stats` command.

    Args:
        history: Result history
        streak: Current streak
        badges: Earned badges
        today: Reference date for the daily grid (default: today)
        now: Reference time for the weekly bars (default: now)
    """
    streak_badges, cumulative_badges = badges_by_kind(badges)
    header = Text()
    header.append(f"🔥 Current streak: {streak}\n", style="bold")
    header.append(
        f"Results: {len(history)}  ✅ {history.passed_count()} passed  ❌ {history.failed_count()} failed\n"
    )
    header.append(f"\nStreak badges:     {_badge_line(streak_badges)}\n")
    header.append(f"Cumulative badges: {_badge_line(cumulative_badges)}\n")

    return Panel(
        Group(
            header,
            Text("Last 30 days", style="bold"),
            _daily_grid(history, today),
            Text("\nLast 4 weeks", style="bold"),
            _weekly_bars(history, now),
            _score_table(history),
        ),
        title="Report",
        border_style="magenta",
    )
