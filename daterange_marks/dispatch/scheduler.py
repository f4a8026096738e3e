"""
Cancellable scheduled tasks for debounced refreshes and chunked loads.

The plugin never touches platform timers directly; it asks a scheduler for
a task and keeps the handle so it can cancel it. Three schedulers exist:

- ``ManualScheduler``: virtual clock advanced explicitly (tests, replays)
- ``AsyncioScheduler``: ``loop.call_later`` on a running event loop
- ``ImmediateScheduler``: runs callbacks synchronously, no coalescing
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class ScheduledTask:
    """Handle of a callback scheduled for later execution."""

    def __init__(self, callback: Callable[[], Any], due_ms: float = 0.0):
        self.callback = callback
        self.due_ms = due_ms
        self.cancelled = False
        self.done = False
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return not self.cancelled and not self.done

    def cancel(self) -> None:
        if self.done:
            return
        self.cancelled = True
        if self._handle is not None:
            self._handle.cancel()

    def run(self) -> None:
        if not self.pending:
            return
        self.done = True
        self.callback()


class Scheduler(ABC):
    """Source of cancellable delayed callbacks."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> ScheduledTask:
        """Schedule ``callback`` to run after ``delay_ms`` milliseconds."""
        pass


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler driven by a virtual clock.

    Tasks run only from ``advance`` or ``run_pending``, in due-time order
    and, for equal due times, in scheduling order.
    """

    def __init__(self) -> None:
        self.now_ms = 0.0
        self._queue: list[tuple[float, int, ScheduledTask]] = []
        self._sequence = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> ScheduledTask:
        task = ScheduledTask(callback, due_ms=self.now_ms + max(delay_ms, 0))
        heapq.heappush(self._queue, (task.due_ms, next(self._sequence), task))
        return task

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, task in self._queue if task.pending)

    def advance(self, ms: float) -> int:
        """Move the clock forward, running every task that becomes due."""
        target = self.now_ms + ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            self.now_ms = max(self.now_ms, due)
            if task.pending:
                task.run()
                ran += 1
        self.now_ms = target
        return ran

    def run_pending(self) -> int:
        """Run every queued task regardless of due time."""
        ran = 0
        while self._queue:
            due, _, task = heapq.heappop(self._queue)
            self.now_ms = max(self.now_ms, due)
            if task.pending:
                task.run()
                ran += 1
        return ran


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> ScheduledTask:
        task = ScheduledTask(callback, due_ms=delay_ms)
        task._handle = self.loop.call_later(max(delay_ms, 0) / 1000.0, task.run)
        return task


class ImmediateScheduler(Scheduler):
    """Runs every callback synchronously at scheduling time."""

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> ScheduledTask:
        task = ScheduledTask(callback, due_ms=0.0)
        task.run()
        return task


def default_scheduler() -> Scheduler:
    """Asyncio scheduler inside a running loop, immediate scheduler otherwise."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running event loop, refreshes run immediately")
        return ImmediateScheduler()
    return AsyncioScheduler(loop)
