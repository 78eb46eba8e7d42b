"""
Per-key request coalescing for thumbnail generation.

The first caller for a key starts the work as an asyncio task and registers it;
everyone else asking for the same key while it runs awaits that task instead of
starting their own. The registry entry is dropped as soon as the task finishes,
so this is not a cache: a later call goes back through the normal path.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GenerationCoordinator:
    def __init__(self) -> None:
        self._inflight: Dict[str, asyncio.Task] = {}
        self.started = 0

    def __len__(self) -> int:
        return len(self._inflight)

    def in_flight(self, key: str) -> bool:
        return key in self._inflight

    async def run_once(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._run(key, fn), name=f"generate:{key}")
            task.add_done_callback(self._report)
            self._inflight[key] = task
            self.started += 1
        else:
            logger.debug("[coordinator] joining in-flight generation for %s", key)
        # A cancelled waiter must not cancel the shared generation.
        return await asyncio.shield(task)

    async def _run(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            return await fn()
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]

    @staticmethod
    def _report(task: asyncio.Task) -> None:
        # Failures are logged by whoever serves the result; this only marks them retrieved.
        if task.cancelled():
            return
        exc: Any = task.exception()
        if exc is not None:
            logger.debug("[coordinator] %s failed: %s", task.get_name(), exc)
