import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import schedule

from jobs import scheduled_tasks


@pytest.mark.unit
class TestSafeRun:
    def test_swallows_and_logs_errors(self):
        job = MagicMock(side_effect=RuntimeError("boom"), __name__="job")
        with patch("jobs.scheduled_tasks.logger") as mock_logger:
            scheduled_tasks.safe_run(job)()
        mock_logger.error.assert_called_once()

    def test_passes_arguments(self):
        job = MagicMock(__name__="job")
        scheduled_tasks.safe_run(job)(1, key="value")
        job.assert_called_once_with(1, key="value")


@pytest.mark.unit
class TestInit:
    def test_registers_expiry_sweep_and_heartbeat(self, settings):
        scheduler = scheduled_tasks.init(MagicMock(), settings, schedule.Scheduler())

        intervals = sorted(
            (job.interval, job.unit) for job in scheduler.jobs
        )
        assert intervals == sorted(
            [(settings.notifications.expiry_sweep_minutes, "minutes"), (5, "minutes")]
        )

    def test_creates_scheduler_when_omitted(self, settings):
        scheduler = scheduled_tasks.init(MagicMock(), settings)
        assert isinstance(scheduler, schedule.Scheduler)
        assert len(scheduler.jobs) == 2


@pytest.mark.unit
class TestAsyncJobs:
    async def test_expire_notifications(self):
        service = MagicMock()
        service.expire_notifications = AsyncMock(return_value=4)
        assert await scheduled_tasks.expire_notifications(service) == 4

    async def test_run_async_starts_task_on_loop(self):
        ran = asyncio.Event()

        async def work():
            ran.set()

        scheduled_tasks.run_async(work, "work")()
        await asyncio.wait_for(ran.wait(), timeout=1)

    async def test_failed_async_job_is_logged(self):
        async def failing():
            raise RuntimeError("boom")

        with patch("jobs.scheduled_tasks.logger") as mock_logger:
            scheduled_tasks.run_async(failing, "failing")()
            for _ in range(3):
                await asyncio.sleep(0)
        mock_logger.error.assert_called_once()

    async def test_run_continuously_runs_pending_until_stopped(self):
        scheduler = MagicMock()
        stop_event = asyncio.Event()

        def stop_after_first_run():
            stop_event.set()

        scheduler.run_pending.side_effect = stop_after_first_run

        await asyncio.wait_for(
            scheduled_tasks.run_continuously(scheduler, stop_event, interval=0.01),
            timeout=1,
        )
        scheduler.run_pending.assert_called_once()

    async def test_expiry_job_sweeps_through_scheduler(self, settings):
        service = MagicMock()
        service.expire_notifications = AsyncMock(return_value=0)
        scheduler = scheduled_tasks.init(service, settings, schedule.Scheduler())

        scheduler.run_all()
        for _ in range(3):
            await asyncio.sleep(0)

        service.expire_notifications.assert_awaited_once()
