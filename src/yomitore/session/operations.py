"""
Pending Operations

At most one blocking model call is pending at a time. The call runs on a
worker thread; when it finishes, a Completion is put on a queue that
only the control loop reads. Every operation carries an op_id so the loop can
recognise and drop completions of operations it already gave up on.
"""

from __future__ import annotations

import itertools
import logging
import queue
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from yomitore.errors import InvalidState

logger = logging.getLogger(__name__)


class OperationKind(Enum):
    """What the pending call is doing"""
    GENERATING = "generating"
    EVALUATING = "evaluating"


@dataclass(frozen=True)
class PendingOperation:
    """The single in-flight network call"""
    op_id: int
    kind: OperationKind
    deadline: float
    requested_length: int | None = None
    original: str | None = None
    summary: str | None = None

    def expired(self, now: float) -> bool:
        return now >= self.deadline


@dataclass(frozen=True)
class Completion:
    """Outcome of a finished call: exactly one of output / error is set"""
    op_id: int
    output: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class OperationRunner:
    """
    Runs one callable at a time off the control thread.

    The runner does not track deadlines; the controller owns them and simply
    ignores completions whose op_id is no longer pending.
    """

    def __init__(self) -> None:
        self._executor = self._new_executor()
        self._completions: queue.Queue[Completion] = queue.Queue()
        self._ids = itertools.count(1)
        self._active: Future | None = None

    @staticmethod
    def _new_executor() -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="yomitore-op")

    def next_op_id(self) -> int:
        return next(self._ids)

    @property
    def busy(self) -> bool:
        return self._active is not None and not self._active.done()

    def submit(self, op_id: int, fn: Callable[[], str]) -> None:
        """
        Start `fn` on the worker thread.

        Raises:
            InvalidState: If a previous call is still running
        """
        if self.busy:
            raise InvalidState("An operation is already running.")

        def _done(future: Future) -> None:
            if future.cancelled():
                return
            error = future.exception()
            if error is not None:
                logger.info("Operation %d failed: %s", op_id, error)
                self._completions.put(Completion(op_id, error=str(error) or type(error).__name__))
            else:
                self._completions.put(Completion(op_id, output=future.result()))

        future = self._executor.submit(fn)
        self._active = future
        future.add_done_callback(_done)

    def abandon(self) -> None:
        """
        Forget the running call; its completion will still arrive and be dropped as stale.

        The worker may stay blocked on that call, so later submissions go to a fresh one.
        """
        if self._active is not None and not self._active.done():
            self._executor.shutdown(wait=False)
            self._executor = self._new_executor()
        self._active = None

    def next_completion(self, timeout: float | None = None) -> Completion | None:
        """Return the next completion, waiting up to `timeout` seconds (None: don't wait)"""
        try:
            if timeout is None:
                return self._completions.get_nowait()
            return self._completions.get(timeout=timeout)
        except queue.Empty:
            return None

    def shutdown(self) -> None:
        """Stop accepting work; a call still in flight is left to finish on its own"""
        self._executor.shutdown(wait=False, cancel_futures=True)
