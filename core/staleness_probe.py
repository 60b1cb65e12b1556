# core/staleness_probe.py
import asyncio
import logging
from typing import Awaitable, Callable, Optional
from core.protocols import MetricSearch, StalenessStore
from model.metric import MetricStatus, RetryPolicy, StalenessCriteria

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class StalenessProbe:
    """
    Checks one [min_key, max_key] range against the store and marks every stale
    path AUTO_HIDDEN.

    Flow:
    - One range query per call, no per-leaf lookups.
    - Any failure inside an attempt (query or status write) sleeps `retry.wait`
      and re-runs the whole range; the failed attempt's count is dropped.
    - The last attempt's exception propagates to the caller.
    - Status writes already applied are not rolled back; set_status is idempotent,
      so re-running a range is safe.
    """

    def __init__(
        self,
        store: StalenessStore,
        search: MetricSearch,
        criteria: StalenessCriteria,
        retry: RetryPolicy,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._store = store
        self._search = search
        self._criteria = criteria
        self._retry = retry
        self._sleep = sleep

    async def _attempt(self, min_key: str, max_key: str) -> int:
        stale = await self._store.find_stale(min_key, max_key, self._criteria)
        hidden = 0
        for name in stale:
            await self._search.set_status(name, MetricStatus.AUTO_HIDDEN)
            hidden += 1
        return hidden

    async def check(self, min_key: Optional[str], max_key: Optional[str]) -> int:
        if min_key is None or max_key is None:
            return 0

        wait_s = self._retry.wait.total_seconds()
        attempts = self._retry.attempts
        for attempt in range(1, attempts + 1):
            try:
                hidden = await self._attempt(min_key, max_key)
                break
            except Exception:
                if attempt == attempts:
                    logger.error(
                        "autohide.range.failed attempts=%d min=%s max=%s",
                        attempts,
                        min_key,
                        max_key,
                    )
                    raise
                logger.exception(
                    "Query to clickhouse failed (attempt %d/%d). Retry after %.1f seconds",
                    attempt,
                    attempts,
                    wait_s,
                )
                await self._sleep(wait_s)

        logger.info(
            "%d metrics hidden between <%s> and <%s>", hidden, min_key, max_key
        )
        return hidden
