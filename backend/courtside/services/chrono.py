"""Period clock.

One background task advances every live match's ``chronoSeconds`` by the whole
seconds elapsed since the last tick; a match pauses on its own while it waits
for the next period or once it is finished.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class ChronoTicker:
    def __init__(
        self,
        on_tick: Callable[[int], Awaitable[object]],
        interval: float = 1.0,
    ) -> None:
        self._on_tick = on_tick
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self._carry = 0.0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def elapsed_seconds(self) -> int:
        """Whole seconds covered by one more tick; fractions carry over."""
        self._carry += self.interval
        whole = int(self._carry)
        self._carry -= whole
        return whole

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self._on_tick(self.elapsed_seconds())
            except Exception:
                logger.exception("chrono tick failed")

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("chrono ticker started (every %.2fs)", self.interval)

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.info("chrono ticker stopped")
