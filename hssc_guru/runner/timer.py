"""Interval timer that feeds ticks into a session on the event loop."""
import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class IntervalTimer:
    """
    Calls `callback` every `interval` seconds from an asyncio task.

    Callbacks run on the loop thread, one at a time, so they never interleave
    with request handlers running on the same loop.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], object],
        name: str = "quiz-timer",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.callback = callback
        self.name = name
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Must be called from a running event loop."""
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=self.name)

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.callback()
            except Exception:
                logger.exception(f"Timer {self.name} callback failed")
