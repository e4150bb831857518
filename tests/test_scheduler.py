import threading

import pytest

from salvo.scheduler import DeferredMove, TurnScheduler


def test_zero_delay_runs_inline() -> None:
    calls = []
    move = DeferredMove(0, lambda: calls.append(1)).start()
    assert calls == [1]
    assert not move.pending


@pytest.mark.timeout(5)
def test_delayed_move_runs_once() -> None:
    ran = threading.Event()
    move = DeferredMove(0.01, ran.set).start()
    assert move.wait(2)
    assert ran.is_set()
    assert not move.cancel()


@pytest.mark.timeout(5)
def test_cancel_before_run() -> None:
    calls = []
    move = DeferredMove(5, lambda: calls.append(1)).start()
    assert move.pending
    assert move.cancel()
    assert move.cancelled and not move.pending
    assert calls == []


def test_failing_action_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    def _boom() -> None:
        raise RuntimeError("boom")

    move = DeferredMove(0, _boom).start()
    assert not move.pending
    assert "Deferred move failed" in caplog.text


@pytest.mark.timeout(5)
def test_scheduler_keeps_single_pending_move() -> None:
    calls = []
    scheduler = TurnScheduler(5)
    first = scheduler.schedule(lambda: calls.append("first"))
    second = scheduler.schedule(lambda: calls.append("second"))
    assert first.cancelled
    assert scheduler.current is second and scheduler.pending
    assert scheduler.cancel()
    assert not scheduler.pending
    assert calls == []
