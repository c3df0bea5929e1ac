"""
Request Queue
Bounds concurrent calls to the FFF API and spaces them out.
"""
import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Deque, Set
import logging

logger = logging.getLogger(__name__)


@dataclass
class QueuedTask:
    """Pending operation and the future its caller is awaiting."""
    operation: Callable[[], Awaitable[Any]]
    future: asyncio.Future


class RequestQueue:
    """
    FIFO queue with a concurrency ceiling and a fixed pre-dispatch delay.

    Every dispatched task first waits `delay_seconds`, then runs its
    operation. When a task finishes (success or failure) the queue drains:
    it keeps dispatching pending tasks until it is empty or the ceiling is
    reached again. Results and exceptions are passed through untouched.

    Attributes:
        max_concurrent: Maximum operations in flight
        delay_seconds: Delay paid once per dispatched task
    """

    def __init__(
        self,
        max_concurrent: int = 2,
        delay_seconds: float = 5.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.max_concurrent = max_concurrent
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._pending: Deque[QueuedTask] = deque()
        self._active = 0
        self._running: Set[asyncio.Task] = set()

    @property
    def active_count(self) -> int:
        return self._active

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def enqueue(self, operation: Callable[[], Awaitable[Any]]) -> Any:
        """
        Schedule an operation and wait for its outcome.

        Args:
            operation: Zero-argument coroutine function

        Returns:
            Whatever the operation returns; its exception is re-raised as is
        """
        future = asyncio.get_running_loop().create_future()
        self._pending.append(QueuedTask(operation, future))
        self._process_queue()
        return await future

    def _process_queue(self) -> None:
        while self._active < self.max_concurrent and self._pending:
            task = self._pending.popleft()
            if task.future.cancelled():
                continue
            self._active += 1
            runner = asyncio.create_task(self._execute(task))
            self._running.add(runner)
            runner.add_done_callback(self._running.discard)

    async def _execute(self, task: QueuedTask) -> None:
        try:
            if self.delay_seconds > 0:
                await self._sleep(self.delay_seconds)
            result = await task.operation()
        except Exception as e:
            if not task.future.done():
                task.future.set_exception(e)
        else:
            if not task.future.done():
                task.future.set_result(result)
        finally:
            self._active -= 1
            self._process_queue()
