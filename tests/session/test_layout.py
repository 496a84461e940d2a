"""Tests for pane geometry and wrapping"""

import pytest

from yomitore.session.layout import (
    clamp_scroll,
    max_scroll,
    pane_width,
    training_pane_height,
    wrap_lines,
    wrap_with_cursor,
)

PARAGRAPH = " ".join(f"word{i}" for i in range(60))


class TestWrapLines:
    def test_single_paragraph_becomes_several_lines(self):
        lines = wrap_lines(PARAGRAPH, 20)
        assert len(lines) > 1
        assert all(len(line) <= 20 for line in lines)

    def test_no_characters_lost(self):
        text = "alpha beta\tgamma  delta epsilon"
        assert "".join(wrap_lines(text, 7)) == text

    def test_empty_text(self):
        assert wrap_lines("", 10) == [""]

    def test_width_floor(self):
        assert wrap_lines("abc", 0) == ["a", "b", "c"]


class TestWrapWithCursor:
    def test_cursor_on_wrap_boundary_moves_to_next_line(self):
        lines, cursor = wrap_with_cursor("abcdefgh", (0, 4), 4)
        assert lines == ["abcd", "efgh"]
        assert cursor == (1, 0)

    def test_cursor_at_end_of_text(self):
        _, cursor = wrap_with_cursor("abcdefgh", (0, 8), 4)
        assert cursor == (1, 4)

    def test_cursor_on_empty_line(self):
        _, cursor = wrap_with_cursor("ab\n\ncd", (1, 0), 10)
        assert cursor == (1, 0)


class TestScrollBounds:
    def test_max_scroll(self):
        assert max_scroll(["x"] * 10, 4) == 6
        assert max_scroll(["x"] * 3, 4) == 0

    @pytest.mark.parametrize("offset,expected", [(-1, 0), (3, 3), (50, 6)])
    def test_clamp(self, offset, expected):
        assert clamp_scroll(offset, ["x"] * 10, 4) == expected


class TestPaneGeometry:
    def test_pane_width(self):
        assert pane_width(80) == 76
        assert pane_width(2) == 1

    def test_training_pane_height(self):
        assert training_pane_height(24) == 8
        assert training_pane_height(5) == 3
