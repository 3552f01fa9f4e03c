"""
Event Dispatcher

Runs each unit of work as its own asyncio task so the webhook can acknowledge
immediately and one event never waits on, or breaks, another.
"""

import asyncio
import logging
from typing import Awaitable, Optional, Set

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Spawns and tracks detached tasks."""

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Awaitable, name: Optional[str] = None) -> asyncio.Task:
        """Schedule coro on the running loop and keep it referenced until done."""
        task = asyncio.ensure_future(coro)
        if name:
            task.set_name(name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Task {task.get_name()} was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Task {task.get_name()} failed: {type(exc).__name__}: {exc}",
                exc_info=exc,
            )

    async def drain(self, timeout: Optional[float] = None):
        """Wait for every task spawned so far, including ones they spawn."""
        while self._tasks:
            done, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
            if pending:
                logger.warning(f"{len(pending)} task(s) still running after drain timeout")
                return
