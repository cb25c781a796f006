"""Recurring cleanup timer driven by the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CleanupScheduler:
    """Invokes ``callback`` every ``interval`` seconds on one event loop.

    The callback runs synchronously between other tasks, so it never
    interleaves with a cache operation in progress. The owner must call
    ``stop()``; an abandoned scheduler keeps its task alive until the loop
    closes.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], object],
        name: str = "cache",
    ) -> None:
        self._interval = interval
        self._callback = callback
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> bool:
        """Schedule the recurring task. Returns False if no loop is available."""
        if self.running:
            return True

        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # No event loop running, cleanup stays manual/lazy
                logger.debug("No running event loop, cleanup for '%s' is manual", self._name)
                return False

        self._task = loop.create_task(self._run(), name=f"{self._name}-cleanup")
        logger.debug("Cleanup for '%s' scheduled every %.1fs", self._name, self._interval)
        return True

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.debug("Cleanup for '%s' stopped", self._name)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._callback()
            except Exception:
                logger.exception("Cleanup for '%s' failed", self._name)
