"""Periodic tick driving the engine on a single event loop."""

import asyncio
from datetime import datetime
from typing import Callable, Optional

import structlog

from .config import TICK_SECONDS
from .engine import RotationEngine
from .preferences import SettingsWatcher

log = structlog.get_logger()


class RotationTicker:
    """Calls ``check_and_rotate_if_needed`` every ``interval`` seconds.

    Settings are polled on the same tick, before the rotation check, so a
    settings change and a due rotation are never handled concurrently.
    Cancelling the ticker only stops the countdown; published state is untouched.
    """

    def __init__(self, engine: RotationEngine, watcher: Optional[SettingsWatcher] = None,
                 interval: float = TICK_SECONDS, clock: Callable[[], datetime] = datetime.now):
        self.engine = engine
        self.watcher = watcher
        self.interval = interval
        self.clock = clock
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    def tick(self) -> bool:
        now = self.clock()
        self.ticks += 1
        if self.watcher is not None:
            self.watcher.poll(now)
        return self.engine.check_and_rotate_if_needed(now)

    async def run(self, max_ticks: Optional[int] = None):
        log.info("Ticker started", interval=self.interval)
        try:
            while max_ticks is None or self.ticks < max_ticks:
                self.tick()
                await asyncio.sleep(self.interval)
        finally:
            log.info("Ticker stopped", ticks=self.ticks)

    def start(self, max_ticks: Optional[int] = None) -> asyncio.Task:
        """Schedule ``run`` on the running loop and return the task."""
        self._task = asyncio.get_running_loop().create_task(self.run(max_ticks))
        return self._task

    def stop(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
