"""Recurring background tasks driven by an asyncio timer and stop event."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime

import structlog

from app.core.clock import utcnow

logger = structlog.get_logger(__name__)

Work = Callable[[datetime], Awaitable[object]]


class PeriodicTask:
    """
    Run ``work(now)`` every ``interval`` seconds until stopped.

    A failing run is logged and the loop carries on after ``retry_interval``
    (the normal interval unless given). The stop signal is only observed
    between runs, so shutdown waits for an in-flight run to finish.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        work: Work,
        retry_interval: float | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize the task without starting it."""
        self.name = name
        self.interval = interval
        self.retry_interval = retry_interval if retry_interval is not None else interval
        self.work = work
        self.clock = clock
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        """Whether the loop task is alive."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Spawn the loop on the running event loop."""
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.info("periodic_task_started", task=self.name, interval=self.interval)

    async def stop(self) -> None:
        """Signal the loop to stop and wait for it to exit."""
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        logger.info("periodic_task_stopped", task=self.name)

    async def run_once(self, now: datetime | None = None) -> bool:
        """
        Execute a single run.

        Args:
            now: Time passed to the work function, defaults to the clock

        Returns:
            True if the run completed, False if it raised
        """
        try:
            await self.work(now or self.clock())
        except Exception as e:
            logger.exception("periodic_task_failed", task=self.name, error=str(e))
            return False
        return True

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            succeeded = await self.run_once()
            delay = self.interval if succeeded else self.retry_interval
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            except TimeoutError:
                continue
