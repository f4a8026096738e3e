"""Tests for cancellable schedulers."""

import asyncio

from daterange_marks.dispatch.scheduler import (
    AsyncioScheduler,
    ImmediateScheduler,
    ManualScheduler,
    default_scheduler,
)


class TestManualScheduler:
    """Test the virtual clock scheduler."""

    def test_tasks_run_when_due(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(100, lambda: calls.append("a"))

        assert scheduler.advance(99) == 0
        assert calls == []
        assert scheduler.advance(1) == 1
        assert calls == ["a"]
        assert scheduler.now_ms == 100

    def test_due_order_then_scheduling_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(50, lambda: calls.append("late"))
        scheduler.call_later(10, lambda: calls.append("first"))
        scheduler.call_later(10, lambda: calls.append("second"))

        scheduler.run_pending()
        assert calls == ["first", "second", "late"]

    def test_cancelled_task_never_runs(self):
        scheduler = ManualScheduler()
        calls = []
        task = scheduler.call_later(10, lambda: calls.append("x"))

        assert task.pending
        task.cancel()
        assert not task.pending
        assert scheduler.pending_count == 0
        assert scheduler.advance(100) == 0
        assert calls == []

    def test_tasks_scheduled_while_running_use_current_clock(self):
        scheduler = ManualScheduler()
        calls = []

        def reschedule():
            calls.append(scheduler.now_ms)
            if len(calls) < 3:
                scheduler.call_later(10, reschedule)

        scheduler.call_later(10, reschedule)
        scheduler.advance(100)
        assert calls == [10, 20, 30]

    def test_cancel_after_run_is_noop(self):
        scheduler = ManualScheduler()
        task = scheduler.call_later(0, lambda: None)
        scheduler.run_pending()

        task.cancel()
        assert task.done
        assert not task.cancelled


class TestImmediateScheduler:
    """Test synchronous execution."""

    def test_runs_at_scheduling_time(self):
        calls = []
        task = ImmediateScheduler().call_later(500, lambda: calls.append(1))
        assert calls == [1]
        assert task.done
        assert not task.pending


class TestAsyncioScheduler:
    """Test the event loop backed scheduler."""

    def test_runs_on_loop(self):
        calls = []

        async def main():
            scheduler = AsyncioScheduler()
            scheduler.call_later(5, lambda: calls.append("ran"))
            await asyncio.sleep(0.05)

        asyncio.run(main())
        assert calls == ["ran"]

    def test_cancel_on_loop(self):
        calls = []

        async def main():
            scheduler = AsyncioScheduler()
            task = scheduler.call_later(5, lambda: calls.append("ran"))
            task.cancel()
            await asyncio.sleep(0.05)

        asyncio.run(main())
        assert calls == []

    def test_default_scheduler_selection(self):
        assert isinstance(default_scheduler(), ImmediateScheduler)

        async def main():
            return default_scheduler()

        assert isinstance(asyncio.run(main()), AsyncioScheduler)
