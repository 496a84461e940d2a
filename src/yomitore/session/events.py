"""
Terminal Events

Decoded input events handed to the session controller by the terminal layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Key(Enum):
    """Decoded keys"""
    CHAR = "char"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    DELETE = "delete"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"


@dataclass(frozen=True)
class KeyEvent:
    """
    One key press.

    Printable input is Key.CHAR with the character in `char`. Control
    combinations are Key.CHAR with the lower-case letter and `ctrl=True`.
    """
    key: Key
    char: str = ""
    ctrl: bool = False

    @classmethod
    def of(cls, char: str) -> KeyEvent:
        return cls(Key.CHAR, char)

    @classmethod
    def control(cls, letter: str) -> KeyEvent:
        return cls(Key.CHAR, letter.lower(), ctrl=True)

    def is_char(self, *chars: str) -> bool:
        """True if this is a plain (non-control) press of one of `chars`"""
        return self.key is Key.CHAR and not self.ctrl and self.char in chars

    def is_control(self, letter: str) -> bool:
        return self.key is Key.CHAR and self.ctrl and self.char == letter


@dataclass(frozen=True)
class ResizeEvent:
    """The terminal changed size"""
    width: int
    height: int
