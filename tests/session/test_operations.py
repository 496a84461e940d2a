"""Tests for the single-slot operation runner"""

import threading

import pytest

from yomitore.errors import InvalidState, TransportFailure
from yomitore.session.operations import (
    Completion,
    OperationKind,
    OperationRunner,
    PendingOperation,
)

WAIT = 5.0


@pytest.fixture
def runner():
    runner = OperationRunner()
    yield runner
    runner.shutdown()


class TestPendingOperation:
    def test_expired(self):
        op = PendingOperation(op_id=1, kind=OperationKind.GENERATING, deadline=10.0, requested_length=400)
        assert not op.expired(9.9)
        assert op.expired(10.0)


class TestCompletion:
    def test_succeeded(self):
        assert Completion(1, output="x").succeeded
        assert not Completion(1, error="boom").succeeded


class TestOperationRunner:
    def test_op_ids_increase(self, runner):
        first = runner.next_op_id()
        second = runner.next_op_id()
        assert second > first

    def test_success_completion(self, runner):
        runner.submit(7, lambda: "passage")
        completion = runner.next_completion(timeout=WAIT)
        assert completion == Completion(7, output="passage")

    def test_error_completion(self, runner):
        def fail():
            raise TransportFailure("network down")

        runner.submit(3, fail)
        completion = runner.next_completion(timeout=WAIT)
        assert completion.op_id == 3
        assert completion.output is None
        assert completion.error == "network down"

    def test_no_completion_yet(self, runner):
        assert runner.next_completion() is None

    def test_second_submit_while_busy(self, runner):
        release = threading.Event()
        runner.submit(1, lambda: release.wait(WAIT) and "done")
        try:
            with pytest.raises(InvalidState):
                runner.submit(2, lambda: "other")
        finally:
            release.set()
        assert runner.next_completion(timeout=WAIT).op_id == 1

    def test_abandon_allows_next_submit(self, runner):
        release = threading.Event()
        runner.submit(1, lambda: release.wait(WAIT) and "late")
        runner.abandon()
        runner.submit(2, lambda: "fresh")
        release.set()

        completions = [runner.next_completion(timeout=WAIT), runner.next_completion(timeout=WAIT)]
        assert sorted(c.op_id for c in completions) == [1, 2]

    def test_abandoned_call_does_not_block_the_next(self, runner):
        release = threading.Event()
        runner.submit(1, lambda: release.wait(WAIT) and "late")
        runner.abandon()
        try:
            runner.submit(2, lambda: "fresh")
            completion = runner.next_completion(timeout=WAIT)
            assert completion == Completion(2, output="fresh")
        finally:
            release.set()
        assert runner.next_completion(timeout=WAIT).op_id == 1

    def test_not_busy_after_completion(self, runner):
        runner.submit(1, lambda: "x")
        runner.next_completion(timeout=WAIT)
        assert not runner.busy
