"""
Detached background work.

Tasks spawned here are best-effort: nobody awaits them and there is no
delivery guarantee. Every failure is written to the log instead of vanishing.
"""

import asyncio
import logging
from functools import partial
from typing import Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """Owns fire-and-forget tasks so they are not garbage collected mid-flight"""

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, operation: Callable[[], Awaitable], label: str) -> asyncio.Task:
        task = asyncio.ensure_future(operation())
        self._tasks.add(task)
        task.add_done_callback(partial(self._on_done, label))
        return task

    def _on_done(self, label: str, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Background task cancelled: {label}")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task failed: {label}: {exc!r}", exc_info=exc)
        else:
            logger.debug(f"Background task finished: {label}")

    async def drain(self, timeout: Optional[float] = None):
        """Wait for the tasks currently in flight. Used at shutdown and in tests."""
        if not self._tasks:
            return
        await asyncio.wait(set(self._tasks), timeout=timeout)

    async def shutdown(self, timeout: float = 5.0):
        await self.drain(timeout)
        remaining = list(self._tasks)
        for task in remaining:
            task.cancel()
        if remaining:
            logger.warning(f"Cancelled {len(remaining)} unfinished background tasks")
            await asyncio.gather(*remaining, return_exceptions=True)
