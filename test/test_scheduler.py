# /test/test_scheduler.py
# Drives PeriodicTask with a fake clock and sleep, so no test waits on real time.
import asyncio

import pytest

from bridge_gas.core.scheduler import PeriodicTask


class FakeTime:
    """A clock whose sleep() advances time and blocks after ``ticks`` sleeps."""
    def __init__(self, ticks: int):
        self.now = 0.0
        self.ticks = ticks
        self.sleeps = []
        self.exhausted = asyncio.Event()

    def clock(self) -> float:
        return self.now

    async def sleep(self, delay: float):
        self.sleeps.append(delay)
        if len(self.sleeps) >= self.ticks:
            self.exhausted.set()
            await asyncio.Event().wait()  # park until the task is cancelled
        self.now += delay


async def settle():
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_first_cycle_runs_immediately():
    fake = FakeTime(ticks=1)
    calls = []

    async def cycle():
        calls.append(fake.now)

    task = PeriodicTask(cycle, 15, sleep=fake.sleep, clock=fake.clock)
    task.start()
    await asyncio.wait_for(fake.exhausted.wait(), timeout=1)

    assert calls == [0.0]
    assert fake.sleeps == [15]
    await task.stop()
    assert not task.running


@pytest.mark.asyncio
async def test_cycles_repeat_on_fixed_interval():
    fake = FakeTime(ticks=4)
    calls = []

    async def cycle():
        calls.append(fake.now)

    task = PeriodicTask(cycle, 10, sleep=fake.sleep, clock=fake.clock)
    task.start()
    await asyncio.wait_for(fake.exhausted.wait(), timeout=1)
    await task.stop()

    assert calls == [0.0, 10.0, 20.0, 30.0]
    assert task.cycles == 4


@pytest.mark.asyncio
async def test_failed_cycle_does_not_stop_schedule():
    fake = FakeTime(ticks=3)
    calls = []

    async def cycle():
        calls.append(fake.now)
        raise RuntimeError("cycle failed")

    task = PeriodicTask(cycle, 5, sleep=fake.sleep, clock=fake.clock)
    task.start()
    await asyncio.wait_for(fake.exhausted.wait(), timeout=1)
    await task.stop()

    assert len(calls) == 3


@pytest.mark.asyncio
async def test_overrunning_cycle_drops_missed_ticks():
    fake = FakeTime(ticks=2)
    calls = []

    async def cycle():
        calls.append(fake.now)
        if len(calls) == 1:
            fake.now += 25  # first cycle takes 2.5 intervals

    task = PeriodicTask(cycle, 10, sleep=fake.sleep, clock=fake.clock)
    task.start()
    await asyncio.wait_for(fake.exhausted.wait(), timeout=1)
    await task.stop()

    assert task.skipped == 2
    # next run realigned to t=30 instead of bursting the missed ticks
    assert calls == [0.0, 30.0]
    assert fake.sleeps[0] == pytest.approx(5)


@pytest.mark.asyncio
async def test_run_now_skips_while_cycle_in_flight():
    release = asyncio.Event()
    calls = []

    async def cycle():
        calls.append(1)
        await release.wait()

    task = PeriodicTask(cycle, 60)
    first = asyncio.create_task(task.run_now())
    await settle()

    assert await task.run_now() is False
    release.set()
    assert await first is True
    assert len(calls) == 1
    assert task.skipped == 1


def test_interval_must_be_positive():
    async def cycle():
        pass

    with pytest.raises(ValueError):
        PeriodicTask(cycle, 0)
