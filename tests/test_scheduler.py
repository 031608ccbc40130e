from __future__ import annotations

import asyncio
import gc
import logging

import pytest

from callgrid.scheduler import SchedulerState, UpdateScheduler


class _Recorder:
    def __init__(self, clock, gate: asyncio.Event | None = None) -> None:
        self.clock = clock
        self.gate = gate
        self.starts: list[float] = []

    async def __call__(self) -> None:
        self.starts.append(self.clock())
        if self.gate is not None:
            await self.gate.wait()


@pytest.mark.asyncio
async def test_request_right_after_creation_waits_full_interval(clock) -> None:
    run = _Recorder(clock)
    scheduler = UpdateScheduler(run, min_interval=2.5, clock=clock, sleep=clock.sleep)

    scheduler.request()
    assert scheduler.state == SchedulerState.PENDING
    await scheduler.wait_idle()

    assert clock.sleeps == [2.5]
    assert run.starts == [1002.5]
    assert scheduler.state == SchedulerState.IDLE


@pytest.mark.asyncio
async def test_delay_clamps_to_zero_after_quiet_period(clock) -> None:
    run = _Recorder(clock)
    scheduler = UpdateScheduler(run, min_interval=2.5, clock=clock, sleep=clock.sleep)
    clock.advance(60.0)

    assert scheduler.next_delay() == 0.0
    scheduler.request()
    await scheduler.wait_idle()

    assert clock.sleeps == []
    assert run.starts == [1060.0]


@pytest.mark.asyncio
async def test_burst_during_run_collapses_to_one_follow_up(clock) -> None:
    gate = asyncio.Event()
    run = _Recorder(clock, gate)
    scheduler = UpdateScheduler(run, min_interval=2.5, clock=clock, sleep=clock.sleep)
    clock.advance(10.0)

    scheduler.request()
    await asyncio.sleep(0)
    assert len(run.starts) == 1

    for _ in range(25):
        scheduler.request()
    assert scheduler.state == SchedulerState.PENDING_QUEUED

    gate.set()
    await scheduler.wait_idle()

    assert len(run.starts) == 2
    assert scheduler.runs_started == 2
    # The follow-up honours the spacing from the first completion.
    assert clock.sleeps == [2.5]


@pytest.mark.asyncio
async def test_requests_while_waiting_to_run_add_one_follow_up(clock) -> None:
    released = asyncio.Event()
    sleeps: list[float] = []

    async def gated_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        await released.wait()
        clock.advance(seconds)

    run = _Recorder(clock)
    scheduler = UpdateScheduler(run, min_interval=2.5, clock=clock, sleep=gated_sleep)

    scheduler.request()
    await asyncio.sleep(0)
    assert sleeps == [2.5]
    assert run.starts == []

    for _ in range(5):
        scheduler.request()
    assert scheduler.state == SchedulerState.PENDING_QUEUED

    released.set()
    await scheduler.wait_idle()

    assert scheduler.runs_started == 2
    # The follow-up waits a full interval after the first run completed.
    assert run.starts == [1002.5, 1005.0]
    assert sleeps == [2.5, 2.5]
    with pytest.raises(AttributeError):
        scheduler.runs_started = 0


@pytest.mark.asyncio
async def test_requests_closer_than_interval_are_spaced(clock) -> None:
    run = _Recorder(clock)
    scheduler = UpdateScheduler(run, min_interval=2.5, clock=clock, sleep=clock.sleep)
    clock.advance(10.0)

    scheduler.request()
    await scheduler.wait_idle()
    clock.advance(1.0)
    scheduler.request()
    await scheduler.wait_idle()

    assert len(run.starts) == 2
    assert run.starts[1] - run.starts[0] >= 2.5


@pytest.mark.asyncio
async def test_failed_run_does_not_wedge_scheduler(clock) -> None:
    calls = 0

    async def run() -> None:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("boom")

    scheduler = UpdateScheduler(run, min_interval=0.0, clock=clock, sleep=clock.sleep)

    scheduler.request()
    with pytest.raises(RuntimeError):
        await scheduler.wait_idle()
    assert scheduler.state == SchedulerState.IDLE

    scheduler.request()
    await scheduler.wait_idle()
    assert calls == 2


@pytest.mark.asyncio
async def test_failed_run_without_waiter_is_logged_not_leaked(clock, caplog) -> None:
    async def run() -> None:
        raise RuntimeError("boom")

    scheduler = UpdateScheduler(run, min_interval=0.0, clock=clock, sleep=clock.sleep)

    with caplog.at_level(logging.ERROR):
        scheduler.request()
        for _ in range(3):
            await asyncio.sleep(0)
        assert scheduler.state == SchedulerState.IDLE
        gc.collect()

    assert "Grid update failed" in caplog.text
    assert "never retrieved" not in caplog.text


@pytest.mark.asyncio
async def test_close_cancels_scheduled_run(clock) -> None:
    run = _Recorder(clock)

    async def never(_seconds: float) -> None:
        await asyncio.Event().wait()

    scheduler = UpdateScheduler(run, min_interval=2.5, clock=clock, sleep=never)
    scheduler.request()
    await asyncio.sleep(0)

    await scheduler.close()

    assert run.starts == []
    assert scheduler.state == SchedulerState.IDLE


@pytest.mark.asyncio
async def test_request_threadsafe_marshals_onto_loop(clock) -> None:
    loop = asyncio.get_running_loop()
    run = _Recorder(clock)
    scheduler = UpdateScheduler(run, min_interval=0.0, clock=clock, sleep=clock.sleep, loop=loop)

    await loop.run_in_executor(None, scheduler.request_threadsafe)
    await asyncio.sleep(0)
    await scheduler.wait_idle()

    assert len(run.starts) == 1


def test_request_threadsafe_requires_loop(clock) -> None:
    async def run() -> None:
        return None

    scheduler = UpdateScheduler(run, clock=clock)
    with pytest.raises(RuntimeError):
        scheduler.request_threadsafe()
