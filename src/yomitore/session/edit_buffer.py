"""
Edit Buffer

Multi-line text input for the user's summary.

The buffer holds its content as one string and the cursor as a character
index into it. Editing keys only apply while the buffer is in EDITING mode;
in NAVIGATING mode the same keys belong to the session (scrolling, menu
shortcuts) and every mutator is a no-op. clear() is the exception and always
applies.
"""

from __future__ import annotations

from enum import Enum

from yomitore.session.layout import wrap_lines, wrap_with_cursor


class BufferMode(Enum):
    """Whether keystrokes edit the buffer"""
    NAVIGATING = "navigating"
    EDITING = "editing"


class Direction(Enum):
    """Cursor movements"""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"


class EditBuffer:
    """Text content, a cursor in [0, len(content)], and an editing mode"""

    def __init__(self, content: str = "", mode: BufferMode = BufferMode.NAVIGATING) -> None:
        self._content = content
        self._cursor = len(content)
        self.mode = mode

    @property
    def editing(self) -> bool:
        return self.mode is BufferMode.EDITING

    @property
    def cursor(self) -> int:
        return self._cursor

    def enter_editing(self) -> None:
        self.mode = BufferMode.EDITING

    def exit_editing(self) -> None:
        self.mode = BufferMode.NAVIGATING

    def contents(self) -> str:
        return self._content

    def is_blank(self) -> bool:
        return not self._content.strip()

    # ---- mutators ----

    def insert(self, text: str) -> None:
        """Insert text at the cursor and move the cursor past it"""
        if not self.editing or not text:
            return
        self._content = self._content[:self._cursor] + text + self._content[self._cursor:]
        self._cursor += len(text)

    def newline(self) -> None:
        self.insert("\n")

    def backspace(self) -> None:
        """Delete the character before the cursor"""
        if not self.editing or self._cursor == 0:
            return
        self._content = self._content[:self._cursor - 1] + self._content[self._cursor:]
        self._cursor -= 1

    def delete(self) -> None:
        """Delete the character under the cursor"""
        if not self.editing or self._cursor >= len(self._content):
            return
        self._content = self._content[:self._cursor] + self._content[self._cursor + 1:]

    def move_cursor(self, direction: Direction) -> None:
        if not self.editing:
            return

        if direction is Direction.LEFT:
            self._cursor = max(0, self._cursor - 1)
        elif direction is Direction.RIGHT:
            self._cursor = min(len(self._content), self._cursor + 1)
        elif direction is Direction.HOME:
            self._cursor = self._line_start(self._cursor)
        elif direction is Direction.END:
            self._cursor = self._line_end(self._cursor)
        elif direction is Direction.UP:
            start = self._line_start(self._cursor)
            if start == 0:
                self._cursor = 0
                return
            column = self._cursor - start
            prev_start = self._line_start(start - 1)
            self._cursor = min(prev_start + column, start - 1)
        elif direction is Direction.DOWN:
            end = self._line_end(self._cursor)
            if end == len(self._content):
                self._cursor = end
                return
            column = self._cursor - self._line_start(self._cursor)
            next_start = end + 1
            self._cursor = min(next_start + column, self._line_end(next_start))

    def clear(self) -> None:
        """Empty the buffer regardless of mode"""
        self._content = ""
        self._cursor = 0

    # ---- presentation ----

    def cursor_location(self) -> tuple[int, int]:
        """Return the cursor as (row, column) over logical lines"""
        before = self._content[:self._cursor]
        row = before.count("\n")
        column = self._cursor - (before.rfind("\n") + 1)
        return row, column

    def wrap(self, width: int) -> list[str]:
        """
        Wrap the content into display lines no wider than `width`.

        Presentation only, the content is not changed.
        """
        return wrap_lines(self._content, width)

    def display_cursor(self, width: int) -> tuple[int, int]:
        """Return the cursor as (row, column) over the lines of wrap(width)"""
        return wrap_with_cursor(self._content, self.cursor_location(), width)[1]

    def _line_start(self, index: int) -> int:
        return self._content.rfind("\n", 0, index) + 1

    def _line_end(self, index: int) -> int:
        end = self._content.find("\n", index)
        return len(self._content) if end == -1 else end

    def __repr__(self) -> str:
        return f"EditBuffer(len={len(self._content)}, cursor={self._cursor}, mode={self.mode.value})"
