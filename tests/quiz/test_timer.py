from __future__ import annotations

import pytest

from quizmaster.quiz.timer import Countdown


def make_countdown(scheduler, seconds=3):
    seen = {"ticks": [], "expired": 0}

    def on_expire():
        seen["expired"] += 1

    countdown = Countdown(
        scheduler,
        seconds,
        on_tick=seen["ticks"].append,
        on_expire=on_expire,
    )
    return countdown, seen


def test_counts_down_and_expires_once(scheduler) -> None:
    countdown, seen = make_countdown(scheduler)
    countdown.start()

    scheduler.advance(10)

    assert seen["ticks"] == [2, 1, 0]
    assert seen["expired"] == 1
    assert countdown.remaining == 0
    assert countdown.active is False
    assert scheduler.pending == []


def test_cancel_stops_further_ticks(scheduler) -> None:
    countdown, seen = make_countdown(scheduler, seconds=5)
    countdown.start()
    scheduler.advance(2)

    countdown.cancel()
    scheduler.advance(10)

    assert seen["ticks"] == [4, 3]
    assert seen["expired"] == 0
    assert countdown.remaining == 3


def test_keeps_a_single_pending_callback(scheduler) -> None:
    countdown, _ = make_countdown(scheduler, seconds=4)
    countdown.start()

    for _ in range(3):
        assert len(scheduler.pending) == 1
        scheduler.advance(1)


def test_cannot_restart(scheduler) -> None:
    countdown, _ = make_countdown(scheduler)
    countdown.start()
    with pytest.raises(RuntimeError):
        countdown.start()

    countdown.cancel()
    with pytest.raises(RuntimeError):
        countdown.start()


def test_requires_positive_duration(scheduler) -> None:
    with pytest.raises(ValueError):
        make_countdown(scheduler, seconds=0)
