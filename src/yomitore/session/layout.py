"""
Screen Layout

Pane geometry shared by the controller (scroll bounds) and the renderer
(what is drawn). Text is wrapped to the inner width of its pane and scrolled
by display line, not by logical line.
"""

from __future__ import annotations

import textwrap

DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 24

# Panel border plus one column of padding on each side
PANE_CHROME_WIDTH = 4
# Two pane borders, the status line and the footer
TRAINING_CHROME_HEIGHT = 8
# One pane border, the status line and the footer
HELP_CHROME_HEIGHT = 4


def pane_width(screen_width: int) -> int:
    """Inner width of a full-width pane"""
    return max(1, screen_width - PANE_CHROME_WIDTH)


def training_pane_height(screen_height: int) -> int:
    """Visible lines of each of the two training panes"""
    return max(3, (screen_height - TRAINING_CHROME_HEIGHT) // 2)


def help_pane_height(screen_height: int) -> int:
    return max(1, screen_height - HELP_CHROME_HEIGHT)


def _wrap_line(line: str, width: int) -> list[str]:
    # Chunks keep every character, so "".join(chunks) == line
    return textwrap.wrap(
        line,
        width=width,
        expand_tabs=False,
        replace_whitespace=False,
        drop_whitespace=False,
        break_long_words=True,
    ) or [""]


def wrap_lines(text: str, width: int) -> list[str]:
    """
    Wrap text into display lines no wider than `width`.

    Logical line breaks are kept; empty lines stay as empty strings.
    """
    width = max(1, width)
    lines: list[str] = []
    for line in text.split("\n"):
        lines.extend(_wrap_line(line, width))
    return lines


def wrap_with_cursor(text: str, cursor: tuple[int, int], width: int) -> tuple[list[str], tuple[int, int]]:
    """
    Wrap text like wrap_lines() and map a (row, column) cursor over logical
    lines onto the wrapped display lines.

    A cursor sitting exactly on a wrap boundary is shown at the start of the
    next display line.
    """
    width = max(1, width)
    row, column = cursor
    lines: list[str] = []
    location = (0, 0)
    for i, line in enumerate(text.split("\n")):
        chunks = _wrap_line(line, width)
        if i == row:
            offset = column
            for j, chunk in enumerate(chunks):
                if offset < len(chunk) or j == len(chunks) - 1:
                    location = (len(lines) + j, offset)
                    break
                offset -= len(chunk)
        lines.extend(chunks)
    return lines, location


def max_scroll(lines: list[str], height: int) -> int:
    """Largest scroll offset that still fills a pane of `height` lines"""
    return max(0, len(lines) - height)


def clamp_scroll(offset: int, lines: list[str], height: int) -> int:
    return max(0, min(offset, max_scroll(lines, height)))

