"""
Strictly sequential queue for chart rendering tasks.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from common.errors import RenderError

logger = logging.getLogger(__name__)


class RenderQueue:
    """Runs render tasks one at a time, in submission order.

    A task is only started once the previous one has completed, so two
    renders are never in flight at the same time.
    """

    def __init__(self, timeout_seconds: Optional[float] = None):
        """Initialize the render queue.

        Args:
            timeout_seconds: Per-task limit; None or 0 waits indefinitely
        """
        self.timeout_seconds = timeout_seconds or None
        self._tasks: List[Tuple[str, str, Callable[[], Awaitable[Any]]]] = []

    def submit(self, source: str, chart: str, task_factory: Callable[[], Awaitable[Any]]) -> None:
        """Queue a render task.

        Args:
            source: Result file the chart belongs to
            chart: Chart name, used in errors
            task_factory: Called when the task's turn comes, returns the awaitable to run
        """
        self._tasks.append((source, chart, task_factory))

    def __len__(self):
        return len(self._tasks)

    async def run(self) -> List[Any]:
        """Run all queued tasks and return their results in submission order.

        A task that exceeds the timeout is still awaited to completion before
        the error is raised: a blocking render running in an executor thread
        cannot be interrupted, and the next render must not overlap it. The
        timeout therefore only marks the chart as failed.

        Raises:
            RenderError: If a task times out; remaining tasks are dropped
        """
        results = []
        try:
            while self._tasks:
                source, chart, task_factory = self._tasks.pop(0)
                logger.debug(f"Rendering {chart} chart for {source}")

                if self.timeout_seconds is None:
                    results.append(await task_factory())
                    continue

                task = asyncio.ensure_future(task_factory())
                try:
                    results.append(await asyncio.wait_for(asyncio.shield(task), self.timeout_seconds))
                except asyncio.TimeoutError:
                    logger.warning(f"{chart} chart for {source} exceeded {self.timeout_seconds}s, "
                                   f"waiting for it to finish before continuing")
                    await asyncio.wait([task])
                    if not task.cancelled() and task.exception() is not None:
                        logger.debug(f"Timed-out {chart} render for {source} failed: {task.exception()}")
                    raise RenderError(source, chart, f"timed out after {self.timeout_seconds}s")
        finally:
            self._tasks.clear()

        return results
