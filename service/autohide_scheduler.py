# service/autohide_scheduler.py
import asyncio
import logging
from contextlib import suppress
from datetime import datetime, timedelta, timezone
from typing import Optional
from model.api import AutohideStatusResponse, HideOutcome
from service.autohide_service import AutohideService

logger = logging.getLogger(__name__)


class AutohideScheduler:
    """
    Owns the single timeline autohide passes run on.

    One asyncio task sleeps `run_delay`, then runs a pass every `period` at a
    fixed rate. Passes are awaited inside that task, so two passes never overlap.
    Ticks missed while a long pass was running are skipped, not queued.

    Example:
        >>> scheduler = AutohideScheduler(service, run_delay=timedelta(minutes=10))
        >>> scheduler.start()
        >>> scheduler.trigger()  # run now, on the same timeline
        >>> await scheduler.stop()
    """

    def __init__(
        self,
        service: AutohideService,
        enabled: bool = True,
        run_delay: timedelta = timedelta(minutes=10),
        period: timedelta = timedelta(days=1),
    ) -> None:
        if period.total_seconds() <= 0:
            raise ValueError("period must be positive")
        self._service = service
        self._enabled = enabled
        self._run_delay = max(run_delay, timedelta(0))
        self._period = period

        self._task: Optional[asyncio.Task] = None
        self._wake = asyncio.Event()
        self._cancel = asyncio.Event()
        self._stopping = False
        self._running = False
        self._next_run_at: Optional[datetime] = None
        self.last_outcome: Optional[HideOutcome] = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def running(self) -> bool:
        return self._running

    @property
    def started(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        if not self._enabled:
            logger.info("Autohide disabled")
            return False
        if self.started:
            return True
        self._stopping = False
        self._cancel.clear()
        self._task = asyncio.create_task(self._loop(), name="autohide-scheduler")
        logger.info(
            "Autohide scheduled delay=%s period=%s", self._run_delay, self._period
        )
        return True

    def trigger(self) -> bool:
        """Ask for a pass right away. Returns False when the scheduler is not running."""
        if not self.started:
            return False
        self._wake.set()
        return True

    async def stop(self, grace: float = 5.0) -> None:
        """Let an in-flight pass stop between batches, then cancel whatever is left."""
        task = self._task
        if task is None:
            return
        self._stopping = True
        self._cancel.set()
        self._wake.set()
        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=grace)
        except asyncio.TimeoutError:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        finally:
            self._task = None
            self._next_run_at = None
        logger.info("Autohide stopped")

    def snapshot(self) -> AutohideStatusResponse:
        return AutohideStatusResponse(
            enabled=self._enabled,
            running=self._running,
            nextRunAt=self._next_run_at,
            lastOutcome=self.last_outcome,
        )

    async def _run_once(self) -> None:
        self._running = True
        try:
            self.last_outcome = await self._service.run_pass(cancel=self._cancel)
        finally:
            self._running = False

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        period = self._period.total_seconds()
        next_at = loop.time() + self._run_delay.total_seconds()

        while not self._stopping:
            wait_s = max(0.0, next_at - loop.time())
            self._next_run_at = datetime.now(timezone.utc) + timedelta(seconds=wait_s)
            try:
                await asyncio.wait_for(self._wake.wait(), timeout=wait_s)
                triggered = True
            except asyncio.TimeoutError:
                triggered = False
            self._wake.clear()
            if self._stopping:
                break

            await self._run_once()

            if not triggered:
                now = loop.time()
                next_at += period
                while next_at <= now:
                    next_at += period
