# service/autohide_service.py
import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional
from core.namespace_walker import NamespaceWalker
from core.protocols import MetricSearch
from core.staleness_probe import StalenessProbe
from model.api import HideOutcome
from util.constants import MetricTree
from util.errors import PassCancelled
from util.timing import timed

logger = logging.getLogger(__name__)


class AutohideService:
    """
    Runs one autohide pass over the whole metric tree.

    Flow:
    - Tree not loaded yet -> skip quietly (cold start).
    - Walk from the root pattern, summing hidden counts per flushed range.
    - A stop request between batches ends the pass as "cancelled".
    - Any failure is logged and reported as a failed outcome; nothing escapes,
      so the schedule keeps going.
    """

    def __init__(
        self,
        search: MetricSearch,
        probe: StalenessProbe,
        batch_size: int = 10_000,
    ) -> None:
        self._search = search
        self._probe = probe
        self._batch_size = batch_size

    async def run_pass(self, cancel: Optional[asyncio.Event] = None) -> HideOutcome:
        started_at = datetime.now(timezone.utc)

        try:
            loaded = await self._search.is_loaded()
        except Exception as e:
            logger.exception("Failed to check metric tree readiness.")
            return HideOutcome(status="failed", started_at=started_at, error=str(e))

        if not loaded:
            logger.info("autohide.skip reason=tree_not_loaded")
            return HideOutcome(status="skipped", started_at=started_at)

        logger.info("Running autohide.")
        walker = NamespaceWalker(
            self._search, self._probe, batch_size=self._batch_size, cancel=cancel
        )
        try:
            with timed(logger, "autohide.pass", batch_size=self._batch_size) as span:
                hidden = await walker.walk(MetricTree.ALL_PATTERN)
        except PassCancelled as e:
            logger.info("Autohide cancelled. %s", e)
            return HideOutcome(
                status="cancelled",
                started_at=started_at,
                duration_ms=span.ms,
                error=str(e),
            )
        except Exception as e:
            logger.exception("Failed to run autohide.")
            return HideOutcome(
                status="failed",
                started_at=started_at,
                duration_ms=span.ms,
                error=f"{type(e).__name__}: {e}",
            )

        logger.info("Autohide completed. %d metrics hidden", hidden)
        return HideOutcome(
            status="finished", hidden=hidden, started_at=started_at, duration_ms=span.ms
        )
