"""Fixed-interval poller.

Ticks fire on schedule regardless of how long a cycle takes. Cycles never
overlap: a tick that arrives while one is in flight is skipped.
"""
import asyncio
from typing import Awaitable, Callable, Optional

from common.logger import get_logger
from config.settings import POLL_INTERVAL_SEC

logger = get_logger("poller")


class Poller:
    def __init__(self, cycle: Callable[[], Awaitable[object]],
                 interval: float = POLL_INTERVAL_SEC):
        self.cycle = cycle
        self.interval = interval
        self._lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()
        self._loop_task: Optional[asyncio.Task] = None

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def trigger(self) -> bool:
        """Run one cycle now. Returns False if another cycle was still running."""
        if self._lock.locked():
            logger.warning("⏭ Previous scan still in flight, skipping this tick")
            return False
        async with self._lock:
            try:
                await self.cycle()
            except Exception:
                logger.exception("Scan cycle crashed")
        return True

    def trigger_in_background(self) -> asyncio.Task:
        task = asyncio.create_task(self.trigger())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run_forever(self) -> None:
        while True:
            self.trigger_in_background()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self.run_forever())

    async def stop(self) -> None:
        tasks = [t for t in (self._loop_task, *self._tasks) if t is not None]
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._loop_task = None
