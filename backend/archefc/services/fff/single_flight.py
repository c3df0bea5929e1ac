"""
Single-flight helper: concurrent callers asking for the same key share one
in-progress call instead of issuing duplicates.
"""
import asyncio
from typing import Any, Awaitable, Callable, Dict
import logging

logger = logging.getLogger(__name__)


class SingleFlight:
    """Keyed map of in-flight calls to their shared pending result."""

    def __init__(self) -> None:
        self._inflight: Dict[str, asyncio.Future] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._inflight

    async def do(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        """
        Run `factory` for `key`, or join the call already running for it.

        The entry is dropped as soon as the call settles, so a later call
        starts fresh. Cancelling one waiter does not cancel the shared call.
        """
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.debug(f"Joining in-flight request: {key}")
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Future) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark the exception retrieved when every waiter has gone away
        if not task.cancelled():
            task.exception()

    def clear(self) -> None:
        """Detach every in-flight call; later callers start a new one."""
        self._inflight.clear()
