"""Session: edit buffer, pending operations and the view state machine."""

from yomitore.session.controller import SessionController, ViewMode, ViewModel
from yomitore.session.edit_buffer import BufferMode, Direction, EditBuffer
from yomitore.session.events import Key, KeyEvent, ResizeEvent
from yomitore.session.operations import (
    Completion,
    OperationKind,
    OperationRunner,
    PendingOperation,
)

__all__ = [
    "BufferMode",
    "Completion",
    "Direction",
    "EditBuffer",
    "Key",
    "KeyEvent",
    "OperationKind",
    "OperationRunner",
    "PendingOperation",
    "ResizeEvent",
    "SessionController",
    "ViewMode",
    "ViewModel",
]
