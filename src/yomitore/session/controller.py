"""
Session Controller

The view state machine of the trainer.

The controller owns all session state and is only ever touched from the
control thread. Each key event causes at most one transition and at most one
side effect (issuing a model call, persisting the history). Model calls run
through an OperationRunner; their completions come back through its queue
and are applied here, one per loop iteration.

Views:
    MENU     - choose a passage length
    TRAINING - read the passage, write a summary, see the verdict
    REPORT   - streak, badges and activity (pushed over MENU / TRAINING)
    HELP     - key reference (pushed over MENU / TRAINING)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Callable, Protocol

from yomitore.app_config import AppConfig
from yomitore.domain.entities import Badge, ResultHistory, TrainingResult
from yomitore.errors import InvalidState, PersistenceFailure, UnparseableVerdict
from yomitore.infrastructure.history_store import HistoryStore
from yomitore.scoring.verdict_parser import Verdict, format_verdict, parse_verdict
from yomitore.session.edit_buffer import Direction, EditBuffer
from yomitore.session.events import Key, KeyEvent, ResizeEvent
from yomitore.session.layout import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    clamp_scroll,
    help_pane_height,
    pane_width,
    training_pane_height,
    wrap_lines,
)
from yomitore.session.operations import (
    Completion,
    OperationKind,
    OperationRunner,
    PendingOperation,
)
from yomitore.use_cases.badges import recompute
from yomitore.tui.help import HELP_LINES
from yomitore.use_cases.training import TrainingService

logger = logging.getLogger(__name__)

Event = KeyEvent | ResizeEvent

_EDIT_MOVES = {
    Key.LEFT: Direction.LEFT,
    Key.RIGHT: Direction.RIGHT,
    Key.UP: Direction.UP,
    Key.DOWN: Direction.DOWN,
    Key.HOME: Direction.HOME,
    Key.END: Direction.END,
}


class ViewMode(Enum):
    """Top-level views"""
    MENU = "menu"
    TRAINING = "training"
    REPORT = "report"
    HELP = "help"


@dataclass(frozen=True)
class ViewModel:
    """Read-only snapshot of the session, everything the renderer needs"""
    view: ViewMode
    base_view: ViewMode
    width: int
    height: int
    length_options: tuple[int, ...]
    selected_index: int
    passage: str
    passage_scroll: int
    buffer_text: str
    buffer_cursor: tuple[int, int]
    buffer_lines: tuple[str, ...]
    buffer_display_cursor: tuple[int, int]
    editing: bool
    awaiting: OperationKind | None
    verdict: Verdict | None
    show_verdict: bool
    verdict_scroll: int
    status: str | None
    streak: int
    badges: tuple[Badge, ...]
    history: ResultHistory
    help_scroll: int


class Terminal(Protocol):
    def poll_event(self, timeout: float) -> Event | None: ...

    def draw(self, view_model: ViewModel) -> None: ...


class SessionController:
    """
    Drives one training session.

    Args:
        service: Generates passages and evaluates summaries
        history: Previously recorded results
        store: Where the history is persisted (None: keep it in memory only)
        config: Application configuration (timeouts, lengths, badge rules)
        runner: Runs model calls off the control thread
        clock: Monotonic clock used for operation deadlines
        now: Wall clock used to timestamp recorded results
    """

    def __init__(
        self,
        service: TrainingService,
        history: ResultHistory | None = None,
        store: HistoryStore | None = None,
        config: AppConfig | None = None,
        runner: OperationRunner | None = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.service = service
        self.history = history if history is not None else ResultHistory()
        self.store = store
        self.config = config or AppConfig()
        self.runner = runner or OperationRunner()
        self._clock = clock
        self._now = now or (lambda: datetime.now().astimezone())

        self.length_options: tuple[int, ...] = tuple(self.config.session.length_options)
        if not self.length_options:
            raise ValueError("At least one passage length is required.")
        self.timeout_seconds = self.config.api.timeout_seconds
        self.poll_interval = self.config.session.poll_interval_ms / 1000

        self.screen_width = DEFAULT_WIDTH
        self.screen_height = DEFAULT_HEIGHT
        self._views: list[ViewMode] = [ViewMode.MENU]
        self.selected_index = 0
        self.current_length = self.length_options[0]
        self.passage = ""
        self.passage_scroll = 0
        self.buffer = EditBuffer()
        self.pending: PendingOperation | None = None
        self.verdict: Verdict | None = None
        self.show_verdict = False
        self.verdict_scroll = 0
        self.status: str | None = None
        self.help_scroll = 0
        self.running = True
        self._closed = False
        self.report = self._recompute()

    # ---- state queries ----

    @property
    def view(self) -> ViewMode:
        return self._views[-1]

    @property
    def awaiting(self) -> OperationKind | None:
        return self.pending.kind if self.pending is not None else None

    def view_model(self) -> ViewModel:
        return ViewModel(
            view=self.view,
            base_view=self._views[0],
            width=self.screen_width,
            height=self.screen_height,
            length_options=self.length_options,
            selected_index=self.selected_index,
            passage=self.passage,
            passage_scroll=self.passage_scroll,
            buffer_text=self.buffer.contents(),
            buffer_cursor=self.buffer.cursor_location(),
            buffer_lines=tuple(self.buffer.wrap(self._pane_width)),
            buffer_display_cursor=self.buffer.display_cursor(self._pane_width),
            editing=self.buffer.editing,
            awaiting=self.awaiting,
            verdict=self.verdict,
            show_verdict=self.show_verdict,
            verdict_scroll=self.verdict_scroll,
            status=self.status,
            streak=self.report.streak,
            badges=self.report.badges,
            history=ResultHistory(self.history),
            help_scroll=self.help_scroll,
        )

    # ---- control loop ----

    def run(self, terminal: Terminal) -> None:
        """Draw, apply completions and key events until the user quits"""
        try:
            while self.running:
                terminal.draw(self.view_model())
                self.step(terminal.poll_event)
        finally:
            self.shutdown()

    def step(self, poll_event: Callable[[float], Event | None]) -> bool:
        """
        One loop iteration: apply at most one completion, enforce the pending
        deadline, then wait up to the poll interval for one terminal event.

        Returns:
            bool: False once the session has quit
        """
        completion = self.runner.next_completion()
        if completion is not None:
            self.handle_completion(completion)
        self.check_deadline()
        if not self.running:
            return False

        event = poll_event(self.poll_interval)
        if event is not None:
            self.handle_event(event)
        return self.running

    def shutdown(self) -> None:
        """Persist the history (best-effort) and abandon any pending call"""
        if self._closed:
            return
        self._closed = True
        self.running = False
        if self.pending is not None:
            logger.info("Abandoning pending %s operation %d", self.pending.kind.value, self.pending.op_id)
            self.pending = None
        self._persist()
        self.runner.shutdown()

    def quit(self) -> None:
        logger.info("Quit requested")
        self.running = False

    # ---- completions ----

    def handle_completion(self, completion: Completion) -> None:
        """Apply a finished model call; completions for anything but the pending op are dropped"""
        if self.pending is None or completion.op_id != self.pending.op_id:
            logger.info("Dropping stale completion for operation %d", completion.op_id)
            return

        op = self.pending
        self.pending = None
        if op.kind is OperationKind.GENERATING:
            self._finish_generation(completion)
        else:
            self._finish_evaluation(completion)

    def check_deadline(self) -> None:
        """Fail the pending operation as a timeout once its deadline has passed"""
        if self.pending is None or not self.pending.expired(self._clock()):
            return
        op = self.pending
        logger.warning("%s operation %d timed out after %ss", op.kind.value, op.op_id, self.timeout_seconds)
        self.runner.abandon()
        self.handle_completion(Completion(op.op_id, error=f"timed out after {self.timeout_seconds}s"))

    def _finish_generation(self, completion: Completion) -> None:
        if not completion.succeeded:
            self.passage = ""
            self.status = f"Could not generate a passage: {completion.error}. Press n to try again."
            return
        self.passage = completion.output or ""
        self.passage_scroll = 0
        self.buffer.clear()
        self.buffer.exit_editing()
        self.verdict = None
        self.show_verdict = False
        self.verdict_scroll = 0
        self.status = "Press i to start writing your summary."

    def _finish_evaluation(self, completion: Completion) -> None:
        if not completion.succeeded:
            self.status = f"Evaluation failed: {completion.error}. Press i, then Ctrl+S to resubmit."
            return

        verdict = parse_verdict(completion.output or "")
        self.verdict = verdict
        self.show_verdict = True
        self.verdict_scroll = 0
        try:
            passed = verdict.require_outcome()
        except UnparseableVerdict:
            logger.warning("Evaluator output had no overall result; nothing recorded")
            self.status = "Verdict unclear; not recorded. Press e to close it, then i to revise."
            return
        self._record(passed, verdict)
        self.buffer.clear()

    def _record(self, passed: bool, verdict: Verdict) -> None:
        result = TrainingResult(timestamp=self._now(), passed=passed, evaluation=verdict.to_scores())
        self.history.append(result)
        before = set(self.report.badges)
        self.report = self._recompute()
        new_badges = [b for b in self.report.badges if b not in before]
        logger.info("Recorded %s; streak %d", "pass" if passed else "fail", self.report.streak)

        if new_badges:
            earned = ", ".join(f"{b.icon} {b.display_text}" for b in new_badges)
            self.status = f"New badge: {earned}"
        elif passed:
            self.status = f"Passed! Streak: {self.report.streak}. Press n for the next passage."
        else:
            self.status = "Not passed this time. Press n for the next passage."
        self._persist()

    def _recompute(self):
        badges = self.config.badges
        return recompute(
            self.history,
            interval=badges.interval,
            streak_cap=badges.streak_cap,
            cumulative_cap=badges.cumulative_cap,
        )

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save_history(self.history, self.report)
        except PersistenceFailure as e:
            logger.warning("History not saved: %s", e)
            self.status = f"Warning: history not saved ({e})"

    # ---- operations ----

    def _issue(self, kind: OperationKind, **details) -> bool:
        """Start a model call; returns False (and does nothing) if one is already pending"""
        try:
            if self.pending is not None:
                raise InvalidState(f"{self.pending.kind.value} operation {self.pending.op_id} is pending")
            op = PendingOperation(
                op_id=self.runner.next_op_id(),
                kind=kind,
                deadline=self._clock() + self.timeout_seconds,
                **details,
            )
            if kind is OperationKind.GENERATING:
                fn = partial(self.service.generate, op.requested_length)
            else:
                fn = partial(self.service.evaluate, op.original, op.summary)
            self.runner.submit(op.op_id, fn)
        except InvalidState as e:
            logger.debug("Ignoring %s request: %s", kind.value, e)
            return False

        self.pending = op
        logger.info("Issued %s operation %d", kind.value, op.op_id)
        return True

    def _start_generation(self, length: int) -> None:
        if not self._issue(OperationKind.GENERATING, requested_length=length):
            return
        self.current_length = length
        self.passage = ""
        self.passage_scroll = 0
        self.show_verdict = False
        self.status = None
        self._views = [ViewMode.TRAINING]

    def _submit(self) -> None:
        if self.pending is not None:
            logger.debug("Submit ignored: %s operation pending", self.pending.kind.value)
            return
        if self.buffer.is_blank():
            self.status = "Write a summary first, then press Ctrl+S."
            return
        self.buffer.exit_editing()
        if self._issue(OperationKind.EVALUATING, original=self.passage, summary=self.buffer.contents()):
            self.status = None

    # ---- key handling ----

    def handle_event(self, event: Event) -> None:
        if isinstance(event, ResizeEvent):
            self._resize(event)
            return
        if event.is_control("c"):
            self.quit()
            return

        view = self.view
        if view is ViewMode.MENU:
            self._menu_key(event)
        elif view is ViewMode.TRAINING:
            if self.buffer.editing:
                self._editing_key(event)
            else:
                self._training_key(event)
        elif view is ViewMode.REPORT:
            self._report_key(event)
        elif view is ViewMode.HELP:
            self._help_key(event)

    def _push(self, view: ViewMode) -> None:
        self._views.append(view)
        if view is ViewMode.HELP:
            self.help_scroll = 0

    def _pop(self) -> None:
        if len(self._views) > 1:
            self._views.pop()

    def _menu_key(self, event: KeyEvent) -> None:
        if event.key is Key.UP or event.is_char("k"):
            self.selected_index = max(0, self.selected_index - 1)
        elif event.key is Key.DOWN or event.is_char("j"):
            self.selected_index = min(len(self.length_options) - 1, self.selected_index + 1)
        elif event.key is Key.ENTER:
            self._start_generation(self.length_options[self.selected_index])
        elif event.is_char("r"):
            self._push(ViewMode.REPORT)
        elif event.is_char("h"):
            self._push(ViewMode.HELP)
        elif event.is_char("q"):
            self.quit()

    def _training_key(self, event: KeyEvent) -> None:
        idle = self.pending is None
        if event.key is Key.ENTER or event.is_char("i"):
            if idle and self.passage and not self.show_verdict:
                self.buffer.enter_editing()
                self.status = None
        elif event.is_char("e"):
            if self.verdict is not None:
                self.show_verdict = not self.show_verdict
        elif event.key is Key.ESCAPE:
            self.show_verdict = False
        elif event.is_char("n"):
            if idle and (self.show_verdict or not self.passage):
                self._start_generation(self.current_length)
        elif event.is_char("m"):
            if idle:
                self._views = [ViewMode.MENU]
                self.status = None
        elif event.key is Key.DOWN or event.is_char("j"):
            self._scroll_passage(1)
        elif event.key is Key.UP or event.is_char("k"):
            self._scroll_passage(-1)
        elif event.is_char("J"):
            self._scroll_verdict(1)
        elif event.is_char("K"):
            self._scroll_verdict(-1)
        elif event.key in (Key.PAGE_DOWN, Key.PAGE_UP):
            page = self._training_pane_height if event.key is Key.PAGE_DOWN else -self._training_pane_height
            if self.show_verdict:
                self._scroll_verdict(page)
            else:
                self._scroll_passage(page)
        elif event.is_char("r"):
            self._push(ViewMode.REPORT)
        elif event.is_char("h"):
            self._push(ViewMode.HELP)
        elif event.is_char("q"):
            self.quit()

    def _editing_key(self, event: KeyEvent) -> None:
        if event.is_control("s"):
            self._submit()
        elif event.key is Key.ESCAPE:
            self.buffer.exit_editing()
        elif event.key is Key.ENTER:
            self.buffer.newline()
        elif event.key is Key.BACKSPACE:
            self.buffer.backspace()
        elif event.key is Key.DELETE:
            self.buffer.delete()
        elif event.key in _EDIT_MOVES:
            self.buffer.move_cursor(_EDIT_MOVES[event.key])
        elif event.key is Key.CHAR and not event.ctrl:
            self.buffer.insert(event.char)

    def _report_key(self, event: KeyEvent) -> None:
        if event.is_char("r") or event.key is Key.ESCAPE:
            self._pop()
        elif event.is_char("q"):
            self.quit()

    def _help_key(self, event: KeyEvent) -> None:
        if event.is_char("h") or event.key is Key.ESCAPE:
            self._pop()
        elif event.key is Key.DOWN or event.is_char("j"):
            self._scroll_help(1)
        elif event.key is Key.UP or event.is_char("k"):
            self._scroll_help(-1)
        elif event.key is Key.PAGE_DOWN:
            self._scroll_help(help_pane_height(self.screen_height))
        elif event.key is Key.PAGE_UP:
            self._scroll_help(-help_pane_height(self.screen_height))
        elif event.is_char("q"):
            self.quit()

    # ---- scrolling ----

    @property
    def _pane_width(self) -> int:
        return pane_width(self.screen_width)

    @property
    def _training_pane_height(self) -> int:
        return training_pane_height(self.screen_height)

    def _passage_lines(self) -> list[str]:
        return wrap_lines(self.passage, self._pane_width)

    def _verdict_lines(self) -> list[str]:
        if self.verdict is None:
            return []
        return wrap_lines(format_verdict(self.verdict), self._pane_width)

    def _scroll_passage(self, delta: int) -> None:
        self.passage_scroll = clamp_scroll(
            self.passage_scroll + delta, self._passage_lines(), self._training_pane_height
        )

    def _scroll_verdict(self, delta: int) -> None:
        if not self.show_verdict:
            return
        self.verdict_scroll = clamp_scroll(
            self.verdict_scroll + delta, self._verdict_lines(), self._training_pane_height
        )

    def _scroll_help(self, delta: int) -> None:
        self.help_scroll = clamp_scroll(self.help_scroll + delta, HELP_LINES, help_pane_height(self.screen_height))

    def _resize(self, event: ResizeEvent) -> None:
        self.screen_width = event.width
        self.screen_height = event.height
        # Keep every offset valid for the new pane sizes
        height = self._training_pane_height
        self.passage_scroll = clamp_scroll(self.passage_scroll, self._passage_lines(), height)
        self.verdict_scroll = clamp_scroll(self.verdict_scroll, self._verdict_lines(), height)
        self.help_scroll = clamp_scroll(self.help_scroll, HELP_LINES, help_pane_height(self.screen_height))
