"""Coalescing, rate-limited scheduler for grid updates.

Requests carry no payload: a run always re-reads live state, so any number
of requests made while a run is scheduled or in flight collapse into a
single follow-up run.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from enum import StrEnum

from callgrid._constants import UPDATE_DELAY_INTERVAL

_logger = logging.getLogger(__name__)


class SchedulerState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    PENDING_QUEUED = "pending_queued"


class UpdateScheduler:
    """Single-writer debounce controller.

    At most one run executes at a time and at most one run is scheduled
    but not yet started.  A run starts no earlier than ``min_interval``
    seconds after the previous run completed.

    Usage::

        scheduler = UpdateScheduler(refresh_grid, min_interval=2.5)
        scheduler.request()
        await scheduler.wait_idle()
    """

    def __init__(
        self,
        run: Callable[[], Awaitable[None]],
        *,
        min_interval: float = UPDATE_DELAY_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._run = run
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._loop = loop
        self._state = SchedulerState.IDLE
        self._last_completion = clock()
        self._task: asyncio.Task[None] | None = None
        self._last_error: Exception | None = None
        self._runs_started = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def runs_started(self) -> int:
        """Number of runs that got past their delay."""
        return self._runs_started

    @property
    def last_completion(self) -> float:
        return self._last_completion

    def next_delay(self) -> float:
        """Seconds a request made now would wait before running."""
        elapsed = self._clock() - self._last_completion
        return max(0.0, self._min_interval - elapsed)

    def request(self) -> None:
        """Ask for a run; must be called on the owning event loop."""
        if self._state is SchedulerState.PENDING:
            self._state = SchedulerState.PENDING_QUEUED
            return
        if self._state is SchedulerState.PENDING_QUEUED:
            return

        loop = self._loop
        if loop is None:
            loop = self._loop = asyncio.get_running_loop()
        delay = self.next_delay()
        self._state = SchedulerState.PENDING
        _logger.debug("Grid update scheduled in %.3fs", delay)
        self._task = loop.create_task(self._run_after(delay))

    def request_threadsafe(self) -> None:
        """Ask for a run from a thread other than the event loop's."""
        if self._loop is None:
            raise RuntimeError("Scheduler is not bound to an event loop yet")
        self._loop.call_soon_threadsafe(self.request)

    async def _run_after(self, delay: float) -> None:
        try:
            if delay > 0:
                await self._sleep(delay)
            self._runs_started += 1
            self._last_error = None
            await self._run()
        except asyncio.CancelledError:
            self._state = SchedulerState.IDLE
            if self._task is asyncio.current_task():
                self._task = None
            raise
        except Exception as exc:
            _logger.exception("Grid update failed")
            self._last_error = exc
        self._complete()

    def _complete(self) -> None:
        self._last_completion = self._clock()
        queued = self._state is SchedulerState.PENDING_QUEUED
        self._state = SchedulerState.IDLE
        self._task = None
        if queued:
            self.request()

    async def wait_idle(self) -> None:
        """Wait until nothing is scheduled or running.

        Re-raises the exception of the last run if it failed and has not
        been reported yet.
        """
        while self._task is not None:
            await asyncio.shield(self._task)
        error, self._last_error = self._last_error, None
        if error is not None:
            raise error

    async def close(self) -> None:
        """Cancel a scheduled or running update."""
        task = self._task
        self._task = None
        self._state = SchedulerState.IDLE
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
