"""Periodic jobs.

Jobs are registered with the ``schedule`` library and run from an asyncio
task started by the server lifespan. Coroutine jobs are started as tasks
on the running loop; a failing job is logged and never stops the loop.
"""

import asyncio
import time
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Set

import schedule

from infrastructure.logging import get_module_logger

if TYPE_CHECKING:
    from infrastructure.configuration import Settings
    from infrastructure.notifications import NotificationService

logger = get_module_logger()

_running_jobs: Set[asyncio.Task] = set()


def safe_run(job):
    def wrapper(*args, **kwargs):
        try:
            job(*args, **kwargs)
        except Exception as e:
            logger.error("scheduled_job_failed", job=job.__name__, error=str(e))

    return wrapper


def run_async(coro_factory: Callable[[], Awaitable], name: str):
    """Wrap a coroutine function as a schedule job that starts a loop task."""

    def job():
        task = asyncio.get_running_loop().create_task(coro_factory(), name=name)
        _running_jobs.add(task)
        task.add_done_callback(_job_finished)

    job.__name__ = name
    return job


def _job_finished(task: asyncio.Task) -> None:
    _running_jobs.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("scheduled_job_failed", job=task.get_name(), error=str(error))


async def expire_notifications(notification_service: "NotificationService") -> int:
    expired = await notification_service.expire_notifications()
    logger.info("expiry_sweep_job_completed", expired=expired)
    return expired


def scheduler_heartbeat():
    logger.info("scheduler_heartbeat", time=time.ctime())


def init(
    notification_service: "NotificationService",
    settings: "Settings",
    scheduler: Optional[schedule.Scheduler] = None,
) -> schedule.Scheduler:
    """Register the periodic jobs.

    Args:
        notification_service: Service whose expired notifications are swept
        settings: Application settings
        scheduler: Scheduler to register on; a new one when omitted

    Returns:
        The scheduler holding the jobs.
    """
    scheduler = scheduler or schedule.Scheduler()
    minutes = settings.notifications.expiry_sweep_minutes
    scheduler.every(minutes).minutes.do(
        safe_run(
            run_async(
                lambda: expire_notifications(notification_service),
                "expire_notifications",
            )
        )
    )
    scheduler.every(5).minutes.do(safe_run(scheduler_heartbeat))
    logger.info("scheduled_tasks_initialized", expiry_sweep_minutes=minutes)
    return scheduler


async def run_continuously(
    scheduler: schedule.Scheduler,
    stop_event: asyncio.Event,
    interval: float = 1.0,
) -> None:
    """Run pending jobs every ``interval`` seconds until ``stop_event`` is set.

    Missed runs are not replayed: a job due several times during one
    interval runs once.
    """
    while not stop_event.is_set():
        scheduler.run_pending()
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass
