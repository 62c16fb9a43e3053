"""Delayed work queue with cancel-by-id.

Each scheduled item is an asyncio timer owned by the running event loop.
Nothing is persisted: pending work is lost when the process stops.

Usage:
    queue = DelayedTaskQueue()
    queue.schedule("n-123", run_at, lambda: dispatcher.dispatch(notification))
    queue.cancel("n-123")
"""

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Optional

import structlog

logger = structlog.get_logger()

CoroutineFactory = Callable[[], Awaitable[None]]


class DelayedTaskQueue:
    """Runs coroutines at a wall-clock time, keyed by task id.

    Scheduling an id that is already pending replaces the earlier entry.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._running: Dict[str, asyncio.Task] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def schedule(
        self, task_id: str, run_at: datetime, coro_factory: CoroutineFactory
    ) -> None:
        """Run ``coro_factory()`` at ``run_at`` (immediately if in the past).

        Args:
            task_id: Key used to cancel the work
            run_at: Timezone-aware due time
            coro_factory: Zero-argument callable returning the coroutine to run
        """
        self.cancel(task_id)
        if run_at.tzinfo is None:
            run_at = run_at.replace(tzinfo=timezone.utc)
        delay = max(0.0, (run_at - datetime.now(timezone.utc)).total_seconds())
        loop = self._get_loop()
        self._timers[task_id] = loop.call_later(
            delay, self._start, task_id, coro_factory
        )
        logger.debug("delayed_task_scheduled", task_id=task_id, delay_seconds=delay)

    def _start(self, task_id: str, coro_factory: CoroutineFactory) -> None:
        self._timers.pop(task_id, None)
        task = self._get_loop().create_task(self._run(task_id, coro_factory))
        self._running[task_id] = task

    async def _run(self, task_id: str, coro_factory: CoroutineFactory) -> None:
        try:
            await coro_factory()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("delayed_task_failed", task_id=task_id, error=str(e))
        finally:
            self._running.pop(task_id, None)

    def cancel(self, task_id: str) -> bool:
        """Cancel pending or running work.

        Returns:
            True if something was cancelled.
        """
        timer = self._timers.pop(task_id, None)
        if timer is not None:
            timer.cancel()
            return True
        task = self._running.pop(task_id, None)
        if task is not None and not task.done():
            task.cancel()
            return True
        return False

    def pending(self) -> List[str]:
        """Ids of work that has not started yet."""
        return list(self._timers)

    async def shutdown(self) -> None:
        """Cancel everything and wait for running work to unwind."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        tasks = list(self._running.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._running.clear()
