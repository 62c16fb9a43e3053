import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from infrastructure.scheduling import DelayedTaskQueue


def _now():
    return datetime.now(timezone.utc)


@pytest.mark.unit
class TestDelayedTaskQueue:
    async def test_past_due_work_runs_immediately(self):
        queue = DelayedTaskQueue()
        ran = asyncio.Event()

        async def work():
            ran.set()

        queue.schedule("t1", _now() - timedelta(minutes=5), work)
        await asyncio.wait_for(ran.wait(), timeout=1)
        assert queue.pending() == []

    async def test_future_work_is_pending_until_cancelled(self):
        queue = DelayedTaskQueue()
        calls = []

        async def work():
            calls.append("ran")

        queue.schedule("t1", _now() + timedelta(hours=1), work)
        assert queue.pending() == ["t1"]

        assert queue.cancel("t1") is True
        assert queue.pending() == []
        assert calls == []

    async def test_cancel_unknown_id_returns_false(self):
        assert DelayedTaskQueue().cancel("missing") is False

    async def test_rescheduling_replaces_previous_entry(self):
        queue = DelayedTaskQueue()
        calls = []

        async def first():
            calls.append("first")

        async def second():
            calls.append("second")

        queue.schedule("t1", _now() + timedelta(hours=1), first)
        queue.schedule("t1", _now() - timedelta(seconds=1), second)
        await asyncio.sleep(0.05)
        assert calls == ["second"]

    async def test_failing_work_does_not_escape(self):
        queue = DelayedTaskQueue()
        done = asyncio.Event()

        async def failing():
            done.set()
            raise RuntimeError("boom")

        queue.schedule("t1", _now(), failing)
        await asyncio.wait_for(done.wait(), timeout=1)
        await asyncio.sleep(0)
        assert queue.pending() == []

    async def test_naive_datetimes_are_treated_as_utc(self):
        queue = DelayedTaskQueue()

        async def work():
            pass

        naive = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=1)
        queue.schedule("t1", naive, work)
        assert queue.pending() == ["t1"]
        await queue.shutdown()

    async def test_shutdown_cancels_everything(self):
        queue = DelayedTaskQueue()

        async def work():
            pass

        queue.schedule("a", _now() + timedelta(hours=1), work)
        queue.schedule("b", _now() + timedelta(hours=2), work)
        await queue.shutdown()
        assert queue.pending() == []
