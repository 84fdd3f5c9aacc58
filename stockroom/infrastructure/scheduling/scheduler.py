"""
Asyncio job scheduler for recurring background work.

Each job runs in its own task with a fixed delay between the end of one
tick and the start of the next, so ticks of the same job never overlap
or pile up. Stopping waits for an in-flight tick to finish.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from stockroom.config import get_logger, job_context

logger = get_logger(__name__)


@dataclass
class JobRun:
    """Outcome of one tick."""

    job: str
    started_at: datetime
    duration_ms: int
    success: bool
    result: Any = None
    error: str | None = None


class PeriodicJob:
    """A named coroutine invoked on a fixed cadence."""

    def __init__(
        self,
        name: str,
        func: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        run_on_start: bool = False,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self.func = func
        self.interval_seconds = interval_seconds
        self.run_on_start = run_on_start
        self.last_run: JobRun | None = None
        self.run_count = 0
        self._lock = asyncio.Lock()

    async def run_once(self) -> JobRun:
        """Run the job body now, after any tick already in progress."""
        async with self._lock:
            with job_context(self.name):
                started_at = datetime.utcnow()
                start = time.time()
                logger.info("job_started")
                try:
                    result = await self.func()
                except Exception as e:
                    run = JobRun(
                        job=self.name,
                        started_at=started_at,
                        duration_ms=int((time.time() - start) * 1000),
                        success=False,
                        error=str(e),
                    )
                    logger.error(
                        "job_failed",
                        error=str(e),
                        duration_ms=run.duration_ms,
                        exc_info=True,
                    )
                else:
                    run = JobRun(
                        job=self.name,
                        started_at=started_at,
                        duration_ms=int((time.time() - start) * 1000),
                        success=True,
                        result=result,
                    )
                    logger.info("job_completed", duration_ms=run.duration_ms)

            self.run_count += 1
            self.last_run = run
            return run


class JobScheduler:
    """Owns the background tasks of registered periodic jobs."""

    def __init__(self) -> None:
        self._jobs: dict[str, PeriodicJob] = {}
        self._tasks: list[asyncio.Task] = []
        self._stopping = asyncio.Event()

    @property
    def jobs(self) -> dict[str, PeriodicJob]:
        return dict(self._jobs)

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def add_job(
        self,
        name: str,
        func: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        run_on_start: bool = False,
    ) -> PeriodicJob:
        """Register a job. Must be called before start()."""
        if name in self._jobs:
            raise ValueError(f"Job already registered: {name}")
        job = PeriodicJob(name, func, interval_seconds, run_on_start=run_on_start)
        self._jobs[name] = job
        return job

    async def run_job(self, name: str) -> JobRun:
        """Invoke a job body directly, outside its cadence."""
        try:
            job = self._jobs[name]
        except KeyError:
            raise KeyError(f"Unknown job: {name}") from None
        return await job.run_once()

    def start(self) -> None:
        """Start one background task per job."""
        if self.running:
            return
        self._stopping.clear()
        self._tasks = [
            asyncio.create_task(self._loop(job), name=f"job:{job.name}")
            for job in self._jobs.values()
        ]
        logger.info("scheduler_started", jobs=list(self._jobs))

    async def stop(self) -> None:
        """Signal all loops to exit and wait for in-flight ticks."""
        if not self._tasks:
            return
        self._stopping.set()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("scheduler_stopped")

    async def _loop(self, job: PeriodicJob) -> None:
        if not job.run_on_start and await self._sleep(job.interval_seconds):
            return
        while not self._stopping.is_set():
            await job.run_once()
            if await self._sleep(job.interval_seconds):
                return

    async def _sleep(self, seconds: float) -> bool:
        """Wait for the next tick. True when stop was requested."""
        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True
