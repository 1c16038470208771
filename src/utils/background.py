"""Fire-and-forget task runner.

Background writes (auto-saved texts, persisted translations, usage
counters) must never fail or delay the request that triggered them.
BackgroundTasks keeps a strong reference to each spawned task until it
finishes, logs its failure, and lets tests wait with drain().
"""

import asyncio
import logging
from typing import Awaitable

logger = logging.getLogger(__name__)


class BackgroundTasks:
    def __init__(self):
        self._tasks: set[asyncio.Task] = set()
        self.failures = 0

    def spawn(self, coro: Awaitable, name: str | None = None) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        if name:
            task.set_name(name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.failures += 1
            logger.warning(
                "Background task failed",
                extra={"task": task.get_name(), "error": str(error), "error_type": type(error).__name__},
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every task spawned so far (and any they spawn) is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
