"""Tests for the periodic tick."""

import asyncio
from datetime import datetime, timedelta

from vocab_rotation.preferences import PrefKey, SettingsWatcher
from vocab_rotation.ticker import RotationTicker


class FakeClock:
    def __init__(self, start: datetime, step: timedelta):
        self.current = start
        self.step = step

    def __call__(self):
        value = self.current
        self.current += self.step
        return value


def test_tick_primes_then_waits(engine, now):
    ticker = RotationTicker(engine, clock=FakeClock(now, timedelta(minutes=1)))

    assert ticker.tick() is True
    assert ticker.tick() is False
    assert ticker.ticks == 2


def test_run_rotates_on_schedule(engine, now):
    clock = FakeClock(now, timedelta(hours=1))
    ticker = RotationTicker(engine, interval=0, clock=clock)

    asyncio.run(ticker.run(max_ticks=9))

    # Ticks at 9:00 .. 17:00 with a 4 hour interval: 9:00, 13:00, 17:00
    assert len(engine.history()) == 3


def test_tick_polls_settings_first(engine, preferences, now):
    watcher = SettingsWatcher(preferences, engine.handle_settings_changed)
    ticker = RotationTicker(engine, watcher, clock=FakeClock(now, timedelta(seconds=1)))
    ticker.tick()

    preferences.set(PrefKey.IS_LEARNING_NEW_LANGUAGE, False)
    ticker.tick()

    assert engine.current_word(now + timedelta(seconds=1)).language_code == "en"


def test_stop_cancels_task(engine, now):
    async def scenario():
        ticker = RotationTicker(engine, interval=10, clock=FakeClock(now, timedelta(seconds=1)))
        task = ticker.start()
        await asyncio.sleep(0)
        ticker.stop()
        try:
            await task
        except asyncio.CancelledError:
            pass
        return task

    task = asyncio.run(scenario())

    assert task.cancelled()
    assert engine.current_word(now) is not None
