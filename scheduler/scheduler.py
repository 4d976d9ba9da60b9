"""Recurring task scheduler driven by an injectable clock."""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional

logger = logging.getLogger(__name__)

TaskFunc = Callable[[], Awaitable[Any]]


@dataclass
class ScheduledTask:
    """A task and the clock time it is next due."""
    name: str
    func: TaskFunc
    next_run: float
    interval: Optional[float] = None  # None runs once

    @property
    def recurring(self) -> bool:
        return self.interval is not None


class TaskScheduler:
    """
    Runs async tasks at fixed intervals.

    ``clock`` returns seconds (monotonic by default) and ``sleep`` waits;
    tests pass a fake clock and call ``run_pending`` directly. A failing
    task is logged and skipped until its next due time.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        max_idle: float = 60.0
    ):
        self.clock = clock
        self.sleep = sleep
        self.max_idle = max_idle
        self.tasks: List[ScheduledTask] = []
        self._stopping = False
        self._runner: Optional[asyncio.Task] = None

    def every(self, interval: float, name: str, func: TaskFunc) -> ScheduledTask:
        """Run ``func`` every ``interval`` seconds, first after one interval."""
        if interval <= 0:
            raise ValueError("interval must be positive")
        task = ScheduledTask(name, func, self.clock() + interval, interval)
        self.tasks.append(task)
        return task

    def once(self, delay: float, name: str, func: TaskFunc) -> ScheduledTask:
        """Run ``func`` once after ``delay`` seconds."""
        task = ScheduledTask(name, func, self.clock() + max(0.0, delay))
        self.tasks.append(task)
        return task

    def seconds_until_next(self) -> Optional[float]:
        """Seconds until the earliest task is due, None when nothing is scheduled."""
        if not self.tasks:
            return None
        return max(0.0, min(task.next_run for task in self.tasks) - self.clock())

    async def run_pending(self) -> List[str]:
        """Run every due task, oldest due first. Returns the names run."""
        now = self.clock()
        due = sorted(
            (task for task in self.tasks if task.next_run <= now),
            key=lambda task: task.next_run
        )

        ran = []
        for task in due:
            if task.recurring:
                # Missed ticks are not replayed
                while task.next_run <= now:
                    task.next_run += task.interval
            else:
                self.tasks.remove(task)
            await self._run_task(task)
            ran.append(task.name)
        return ran

    async def _run_task(self, task: ScheduledTask):
        logger.info(f"Running scheduled task: {task.name}")
        try:
            await task.func()
        except Exception:
            logger.exception(f"Scheduled task {task.name} failed")

    async def run_forever(self):
        """Run tasks as they come due until stopped."""
        self._stopping = False
        while not self._stopping:
            await self.run_pending()
            wait = self.seconds_until_next()
            if wait is None or wait > self.max_idle:
                wait = self.max_idle
            await self.sleep(wait)

    def start(self) -> asyncio.Task:
        """Start the scheduler loop in the background."""
        if self._runner is None or self._runner.done():
            self._runner = asyncio.create_task(self.run_forever())
        return self._runner

    async def stop(self):
        """Stop the loop, cancelling any task in progress."""
        self._stopping = True
        if self._runner:
            self._runner.cancel()
            try:
                await self._runner
            except asyncio.CancelledError:
                pass
            self._runner = None
