# /bridge_gas/core/scheduler.py
# Cancellable "run now, then every N seconds" task for asyncio.
import asyncio
import contextlib
import time
from typing import Awaitable, Callable

from bridge_gas.core.logger import get_logger, CYCLES_SKIPPED

log = get_logger(__name__)


class PeriodicTask:
    """
    Runs ``fn`` immediately on ``start()`` and then on a fixed-rate schedule
    until ``stop()``.

    Cycles never overlap. A cycle requested while another is in flight is
    skipped, and scheduled ticks missed by an overrunning cycle are dropped
    rather than queued. An exception raised by a cycle is logged and the
    schedule carries on.

    ``sleep`` and ``clock`` can be replaced to drive the schedule without
    waiting on the wall clock.
    """
    def __init__(
        self,
        fn: Callable[[], Awaitable],
        interval: float,
        name: str = "periodic-task",
        sleep: Callable[[float], Awaitable] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.fn = fn
        self.interval = interval
        self.name = name
        self._sleep = sleep
        self._clock = clock
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self.cycles = 0
        self.skipped = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task
        self._task = asyncio.create_task(self._loop(), name=self.name)
        log.info("PERIODIC_TASK_STARTED", task=self.name, interval_s=self.interval)
        return self._task

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        log.info("PERIODIC_TASK_STOPPED", task=self.name, cycles=self.cycles, skipped=self.skipped)

    async def run_now(self) -> bool:
        """Runs one cycle unless one is already in flight. Returns whether it ran."""
        if self._lock.locked():
            self._skip(1)
            return False
        async with self._lock:
            self.cycles += 1
            try:
                await self.fn()
            except Exception as e:
                self._report_failure(e)
        return True

    async def _loop(self):
        next_run = self._clock()
        while True:
            await self.run_now()
            next_run += self.interval
            now = self._clock()
            if now > next_run:
                missed = int((now - next_run) // self.interval) + 1
                self._skip(missed)
                next_run += missed * self.interval
            await self._sleep(next_run - now)

    def _skip(self, count: int):
        self.skipped += count
        CYCLES_SKIPPED.labels(self.name).inc(count)
        with contextlib.suppress(Exception):
            log.warning("PERIODIC_TASK_CYCLE_SKIPPED", task=self.name, count=count)

    def _report_failure(self, error: Exception):
        # A broken log pipeline must not end the schedule.
        with contextlib.suppress(Exception):
            log.error("PERIODIC_TASK_CYCLE_FAILED", task=self.name, error=str(error), exc_info=True)
