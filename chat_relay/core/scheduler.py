"""Fixed-interval background tasks on the running event loop.

Used for housekeeping that must happen on a timer independent of request
traffic (idle-window sweeps, global counter resets).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class IntervalTask:
    """Invoke ``callback`` every ``interval_seconds`` until stopped.

    The first call happens one full interval after :meth:`start`. A failing
    callback is logged and the loop keeps going.
    """

    def __init__(self, name: str, interval_seconds: float, callback: Callable[[], object]) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self.name = name
        self.interval_seconds = interval_seconds
        self._callback = callback
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    def tick(self) -> None:
        """Run the callback once."""
        self.ticks += 1
        try:
            self._callback()
        except Exception:  # noqa: BLE001
            logger.exception("scheduler.tick_failed", extra={"task": self.name})

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.tick()
