"""Tests for debounced and periodic refresh scheduling."""

from __future__ import annotations

import threading
import time
from typing import Callable, List

import pytest

from git_stages.scheduler import Debouncer, PeriodicRefresher


class FakeTimer:
    """Stand-in for threading.Timer that fires only when told to."""

    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.function()


@pytest.fixture
def timers() -> List[FakeTimer]:
    return []


@pytest.fixture
def debouncer(timers: List[FakeTimer]) -> Debouncer:
    def factory(interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        timers.append(timer)
        return timer

    return Debouncer(0.5, timer_factory=factory)


def test_burst_of_triggers_runs_callback_once(
    debouncer: Debouncer, timers: List[FakeTimer]
) -> None:
    calls: List[str] = []
    for _ in range(5):
        debouncer.schedule(lambda: calls.append("refresh"))

    assert len(timers) == 5
    assert all(timer.cancelled for timer in timers[:-1])
    assert not timers[-1].cancelled
    assert all(timer.interval == 0.5 and timer.daemon for timer in timers)
    assert debouncer.pending

    for timer in timers:
        timer.fire()

    assert calls == ["refresh"]
    assert not debouncer.pending


def test_stale_timer_does_not_fire_after_replacement(
    debouncer: Debouncer, timers: List[FakeTimer]
) -> None:
    calls: List[str] = []
    debouncer.schedule(lambda: calls.append("first"))
    debouncer.schedule(lambda: calls.append("second"))

    # A timer that raced past cancel() must not run its callback.
    timers[0].function()
    assert calls == []

    timers[1].fire()
    assert calls == ["second"]


def test_cancel_drops_pending_call(
    debouncer: Debouncer, timers: List[FakeTimer]
) -> None:
    calls: List[str] = []
    debouncer.schedule(lambda: calls.append("refresh"))
    debouncer.cancel()

    assert timers[0].cancelled
    assert not debouncer.pending
    timers[0].function()
    assert calls == []


def test_trigger_after_fire_arms_new_window(
    debouncer: Debouncer, timers: List[FakeTimer]
) -> None:
    calls: List[int] = []
    debouncer.schedule(lambda: calls.append(1))
    timers[0].fire()
    debouncer.schedule(lambda: calls.append(2))
    timers[1].fire()
    assert calls == [1, 2]


@pytest.mark.parametrize("delay", [-1.0, float("inf"), float("nan")])
def test_invalid_delay_rejected(delay: float) -> None:
    with pytest.raises(ValueError):
        Debouncer(delay)
    with pytest.raises(ValueError):
        PeriodicRefresher(lambda: None, delay)


def test_real_timer_coalesces_burst() -> None:
    calls: List[float] = []
    fired = threading.Event()

    def callback() -> None:
        calls.append(time.monotonic())
        fired.set()

    debouncer = Debouncer(0.05)
    for _ in range(10):
        debouncer.schedule(callback)
    last_trigger = time.monotonic()

    assert fired.wait(2.0)
    time.sleep(0.2)
    assert len(calls) == 1
    assert calls[0] - last_trigger >= 0.04


def test_periodic_refresher_runs_without_triggers() -> None:
    ticked = threading.Event()
    refresher = PeriodicRefresher(ticked.set, 0.01)
    refresher.start()
    try:
        assert ticked.wait(2.0)
        assert refresher.running
    finally:
        refresher.stop()
    assert not refresher.running


def test_periodic_refresher_survives_callback_errors() -> None:
    count = {"value": 0}
    done = threading.Event()

    def callback() -> None:
        count["value"] += 1
        if count["value"] == 1:
            raise RuntimeError("first refresh fails")
        done.set()

    refresher = PeriodicRefresher(callback, 0.01)
    refresher.start()
    try:
        assert done.wait(2.0)
    finally:
        refresher.stop()
    assert count["value"] >= 2


def test_periodic_refresher_start_is_idempotent() -> None:
    refresher = PeriodicRefresher(lambda: None, 10.0)
    refresher.start()
    first = refresher._thread
    refresher.start()
    assert refresher._thread is first
    refresher.stop()


def test_restart_while_slow_refresh_runs_keeps_one_loop() -> None:
    entered = threading.Event()
    release = threading.Event()
    calls = {"value": 0}

    def slow_callback() -> None:
        calls["value"] += 1
        entered.set()
        release.wait(5.0)

    refresher = PeriodicRefresher(slow_callback, 0.01)
    refresher.start()
    assert entered.wait(2.0)
    old_thread = refresher._thread

    # The join inside stop() gives up while the refresh is still running.
    refresher.stop()
    assert old_thread is not None and old_thread.is_alive()

    ticked = threading.Event()
    refresher._callback = ticked.set
    refresher.start()
    try:
        release.set()
        old_thread.join(2.0)
        assert not old_thread.is_alive()
        assert calls["value"] == 1
        assert ticked.wait(2.0)
        assert refresher.running
    finally:
        refresher.stop()
