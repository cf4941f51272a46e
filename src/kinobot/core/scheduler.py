"""Periodic background jobs such as channel reminders."""

import asyncio
from typing import Awaitable, Callable, Hashable, Optional

from kinobot.utils.logger import get_logger

logger = get_logger(__name__)

JobFactory = Callable[[], Awaitable[None]]


class PeriodicScheduler:
    """Runs cancellable jobs on a fixed interval, one per key.

    Keys are typically ``(channel_id, target)`` pairs. Jobs run independently
    of command handling and of each other.
    """

    def __init__(self):
        """Initialize scheduler with no jobs."""
        self._tasks: dict[Hashable, asyncio.Task] = {}

    @property
    def keys(self) -> list[Hashable]:
        """Keys of jobs that are still running."""
        return [key for key, task in self._tasks.items() if not task.done()]

    def is_scheduled(self, key: Hashable) -> bool:
        """Check whether a job is running for a key."""
        task = self._tasks.get(key)
        return task is not None and not task.done()

    def schedule(
        self,
        key: Hashable,
        interval_seconds: float,
        job: JobFactory,
        run_immediately: bool = True,
    ) -> asyncio.Task:
        """Start a periodic job, replacing any job already running for the key.

        Args:
            key: Job identity, e.g. (channel_id, target)
            interval_seconds: Sleep between runs
            job: Coroutine factory invoked once per run
            run_immediately: Run once before the first sleep

        Returns:
            The asyncio task driving the job
        """
        if interval_seconds <= 0:
            raise ValueError("Interval must be positive")

        self.cancel(key)
        task = asyncio.create_task(
            self._run(key, interval_seconds, job, run_immediately),
            name=f"periodic-{key}",
        )
        self._tasks[key] = task
        logger.info("Scheduled periodic job", key=str(key), interval_seconds=interval_seconds)
        return task

    def cancel(self, key: Hashable) -> bool:
        """Cancel the job for a key.

        Returns:
            True if a running job was cancelled
        """
        task: Optional[asyncio.Task] = self._tasks.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.info("Cancelled periodic job", key=str(key))
        return True

    async def shutdown(self):
        """Cancel all jobs and wait for them to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Periodic scheduler stopped", job_count=len(tasks))

    async def _run(
        self,
        key: Hashable,
        interval_seconds: float,
        job: JobFactory,
        run_immediately: bool,
    ):
        if not run_immediately:
            await asyncio.sleep(interval_seconds)

        while True:
            try:
                await job()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(
                    "Periodic job failed",
                    key=str(key),
                    error=str(e),
                    exc_info=True,
                )
            await asyncio.sleep(interval_seconds)
