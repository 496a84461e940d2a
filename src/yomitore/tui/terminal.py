"""
Terminal

Key polling and full-screen drawing.

Input is read in cbreak mode with flow control (IXON) turned off so Ctrl+S
reaches the application; signal keys stay enabled, so Ctrl+C still raises
KeyboardInterrupt. Output goes through a rich Live display on the alternate
screen. parse_keys() is the pure half of the input side and is what the tests
exercise.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import signal
import sys
import termios
import tty
from collections import deque

from rich.console import Console
from rich.live import Live

from yomitore.errors import TerminalUnavailable
from yomitore.session.controller import ViewModel
from yomitore.session.events import Key, KeyEvent, ResizeEvent
from yomitore.tui.render import render_view

logger = logging.getLogger(__name__)

ESC = "\x1b"

_ESCAPE_SEQUENCES = {
    "[A": Key.UP,
    "[B": Key.DOWN,
    "[C": Key.RIGHT,
    "[D": Key.LEFT,
    "[H": Key.HOME,
    "[F": Key.END,
    "OA": Key.UP,
    "OB": Key.DOWN,
    "OC": Key.RIGHT,
    "OD": Key.LEFT,
    "OH": Key.HOME,
    "OF": Key.END,
    "[1~": Key.HOME,
    "[7~": Key.HOME,
    "[4~": Key.END,
    "[8~": Key.END,
    "[3~": Key.DELETE,
    "[5~": Key.PAGE_UP,
    "[6~": Key.PAGE_DOWN,
}

_SINGLE_KEYS = {
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
}


def _read_escape(data: str, start: int) -> tuple[KeyEvent | None, int]:
    """
    Decode the escape sequence starting at data[start] (an ESC).

    Returns:
        (event or None for an unknown sequence, index just past the sequence)
    """
    if start + 1 >= len(data) or data[start + 1] not in "[O":
        return KeyEvent(Key.ESCAPE), start + 1

    if data[start + 1] == "O":
        seq = data[start + 1:start + 3]
        end = start + 3
    else:
        # CSI: parameters then one final byte in @..~
        end = start + 2
        while end < len(data) and not ("@" <= data[end] <= "~"):
            end += 1
        end = min(end + 1, len(data))
        seq = data[start + 1:end]

    key = _ESCAPE_SEQUENCES.get(seq)
    if key is None:
        logger.debug("Ignoring unknown escape sequence %r", seq)
        return None, end
    return KeyEvent(key), end


def parse_keys(data: str) -> list[KeyEvent]:
    """
    Decode raw terminal input into key events.

    Args:
        data: Characters read from the terminal (possibly several keys)

    Returns:
        list[KeyEvent]: in input order
    """
    events: list[KeyEvent] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == ESC:
            event, i = _read_escape(data, i)
            if event is not None:
                events.append(event)
            continue

        if ch == "\r" and data[i + 1:i + 2] == "\n":
            i += 1
        if ch in _SINGLE_KEYS:
            events.append(KeyEvent(_SINGLE_KEYS[ch]))
        elif ord(ch) < 0x20:
            events.append(KeyEvent.control(chr(ord(ch) + 0x60)))
        else:
            events.append(KeyEvent.of(ch))
        i += 1
    return events


class Terminal:
    """
    Context manager owning the terminal for the duration of a session.

    Usage:
        with Terminal() as terminal:
            controller.run(terminal)
    """

    def __init__(self, console: Console | None = None, stdin=None) -> None:
        self.console = console or Console()
        self._stdin = stdin or sys.stdin
        self._fd: int | None = None
        self._saved_attrs = None
        self._previous_handler = None
        self._live: Live | None = None
        self._events: deque = deque()
        self._resized = False
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def __enter__(self) -> Terminal:
        if not self._stdin.isatty():
            raise TerminalUnavailable("yomitore needs an interactive terminal.")
        self._fd = self._stdin.fileno()
        self._saved_attrs = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        attrs = termios.tcgetattr(self._fd)
        attrs[0] &= ~termios.IXON
        termios.tcsetattr(self._fd, termios.TCSANOW, attrs)

        self._previous_handler = signal.signal(signal.SIGWINCH, self._on_resize)
        self._live = Live(console=self.console, screen=True, auto_refresh=False)
        self._live.start()
        # Report the starting size as the first event
        self._resized = True
        logger.debug("Terminal initialised (%dx%d)", self.console.size.width, self.console.size.height)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None
        if self._previous_handler is not None:
            signal.signal(signal.SIGWINCH, self._previous_handler)
            self._previous_handler = None
        if self._saved_attrs is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    def _on_resize(self, signum, frame) -> None:
        self._resized = True

    def poll_event(self, timeout: float) -> KeyEvent | ResizeEvent | None:
        """Return the next event, waiting up to `timeout` seconds for input"""
        if self._resized:
            self._resized = False
            size = self.console.size
            return ResizeEvent(size.width, size.height)
        if self._events:
            return self._events.popleft()

        ready, _, _ = select.select([self._fd], [], [], timeout)
        if not ready:
            return None
        data = self._decoder.decode(os.read(self._fd, 1024))
        self._events.extend(parse_keys(data))
        return self._events.popleft() if self._events else None

    def draw(self, view_model: ViewModel) -> None:
        if self._live is None:
            return
        self._live.update(render_view(view_model), refresh=True)
