# core/namespace_walker.py
import asyncio
import logging
from typing import Optional
from core.protocols import MetricSearch
from core.range_batcher import RangeBatcher
from core.staleness_probe import StalenessProbe
from util.constants import MetricTree
from util.errors import PassCancelled

logger = logging.getLogger(__name__)


class NamespaceWalker:
    """
    Depth-first, pre-order walk of the metric tree.

    Leaves feed a single RangeBatcher shared by every level of the walk. After a
    level's entries are processed the batch is flushed through the probe when it
    is the root level, or when the batch has grown past its size bound.
    """

    def __init__(
        self,
        search: MetricSearch,
        probe: StalenessProbe,
        batch_size: int = 10_000,
        cancel: Optional[asyncio.Event] = None,
    ) -> None:
        self._search = search
        self._probe = probe
        self._batch_size = batch_size
        self._cancel = cancel

    async def walk(self, pattern: str = MetricTree.ALL_PATTERN) -> int:
        """Walk everything under `pattern` and return how many metrics were hidden."""
        batch = RangeBatcher(self._batch_size)
        return await self._walk(pattern, batch, is_root=True)

    async def _walk(self, pattern: str, batch: RangeBatcher, is_root: bool) -> int:
        hidden = 0
        entries = await self._search.search(pattern)
        for entry in sorted(entries, key=lambda e: e.name):
            if entry.is_dir:
                hidden += await self._walk(
                    entry.name + MetricTree.ALL_PATTERN, batch, is_root=False
                )
            else:
                batch.add(entry.name)

        if is_root or batch.needs_flush():
            hidden += await self._flush(batch)
        return hidden

    async def _flush(self, batch: RangeBatcher) -> int:
        if batch.is_empty:
            return 0
        if self._cancel is not None and self._cancel.is_set():
            raise PassCancelled(f"cancelled before range <{batch.min_key}>..<{batch.max_key}>")

        logger.debug(
            "autohide.flush count=%d min=%s max=%s",
            batch.count,
            batch.min_key,
            batch.max_key,
        )
        hidden = await self._probe.check(batch.min_key, batch.max_key)
        batch.reset()
        return hidden
