import asyncio

import pytest

from hssc_guru.runner import IntervalTimer


def test_timer_ticks_until_stopped() -> None:
    ticks = []

    async def scenario() -> None:
        timer = IntervalTimer(0.01, lambda: ticks.append(1))
        timer.start()
        timer.start()  # already running, no second task
        await asyncio.sleep(0.1)
        timer.stop()
        assert not timer.running
        stopped_at = len(ticks)
        await asyncio.sleep(0.05)
        assert len(ticks) == stopped_at

    asyncio.run(scenario())
    assert len(ticks) >= 3


def test_timer_survives_callback_errors() -> None:
    calls = []

    def flaky() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")

    async def scenario() -> None:
        timer = IntervalTimer(0.01, flaky)
        timer.start()
        await asyncio.sleep(0.1)
        timer.stop()

    asyncio.run(scenario())
    assert len(calls) >= 2


def test_timer_can_restart_from_its_own_callback() -> None:
    events = []
    timer = None

    def callback() -> None:
        events.append(len(events))
        if len(events) == 2:
            timer.stop()
            timer.start()

    async def scenario() -> None:
        timer.start()
        await asyncio.sleep(0.1)
        assert timer.running
        timer.stop()

    timer = IntervalTimer(0.01, callback)
    asyncio.run(scenario())
    assert len(events) >= 4


def test_timer_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        IntervalTimer(0, lambda: None)
