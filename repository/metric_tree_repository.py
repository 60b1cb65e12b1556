# repository/metric_tree_repository.py
import logging
from typing import List, Optional, Sequence
from redis.asyncio import Redis
from config.cache import get_redis
from model.metric import MetricEntry, MetricStatus
from repository.namespaces import CHILDREN, LOADED, STATUSES
from util.constants import MetricTree

logger = logging.getLogger(__name__)

_WILDCARD_CHARS = frozenset("*?[]{}")


def _s(v) -> str:
    return v.decode("utf-8") if isinstance(v, (bytes, bytearray)) else str(v)


def parent_of(name: str) -> str:
    """'a.b.c' -> 'a.b.', 'a.b.' -> 'a.', 'a' -> '' (root)."""
    trimmed = name[:-1] if name.endswith(MetricTree.LEVEL_SPLITTER) else name
    head, sep, _ = trimmed.rpartition(MetricTree.LEVEL_SPLITTER)
    return head + sep


class MetricTreeRepository:
    """
    Redis-backed metric namespace.

    Flow:
    - Every directory keeps its direct children in a sorted set with score 0, so
      ZRANGEBYLEX returns them in byte order. Directory members end with '.'.
    - Statuses live in one hash; a missing field means SIMPLE.
    - The loader calls add_metric() for every known path, then mark_loaded().
    - Only one-level "all children" patterns are served: '*' and 'a.b.*'.
    """

    def __init__(self, client: Optional[Redis] = None) -> None:
        self._injected = client

    async def _client(self) -> Redis:
        if self._injected is not None:
            return self._injected
        return await get_redis()

    @staticmethod
    def _key(directory: str) -> str:
        return f"{CHILDREN}:{directory}"

    @staticmethod
    def _directory_of(pattern: str) -> str:
        if not pattern.endswith(MetricTree.ALL_PATTERN):
            raise ValueError(f"Unsupported pattern: {pattern!r}")
        directory = pattern[: -len(MetricTree.ALL_PATTERN)]
        if directory and not directory.endswith(MetricTree.LEVEL_SPLITTER):
            raise ValueError(f"Unsupported pattern: {pattern!r}")
        if _WILDCARD_CHARS.intersection(directory):
            raise ValueError(f"Unsupported pattern: {pattern!r}")
        return directory

    # ---------------- Search / status (used by the autohide pass) ----------------

    async def search(self, pattern: str) -> Sequence[MetricEntry]:
        directory = self._directory_of(pattern)
        r = await self._client()
        members = await r.zrangebylex(self._key(directory), "-", "+")
        names = [_s(m) for m in members or []]
        if not names:
            return []
        raw_statuses = await r.hmget(STATUSES, names)

        out: List[MetricEntry] = []
        for name, raw in zip(names, raw_statuses):
            status = MetricStatus(_s(raw)) if raw is not None else MetricStatus.SIMPLE
            out.append(
                MetricEntry(
                    name=name,
                    is_dir=name.endswith(MetricTree.LEVEL_SPLITTER),
                    status=status,
                )
            )
        return out

    async def set_status(self, name: str, status: MetricStatus) -> None:
        r = await self._client()
        if status.is_hidden:
            current = await r.hget(STATUSES, name)
            if current is not None and MetricStatus(_s(current)).is_hidden:
                return
        await r.hset(STATUSES, name, status.value)

    async def get_status(self, name: str) -> Optional[MetricStatus]:
        r = await self._client()
        if await r.zscore(self._key(parent_of(name)), name) is None:
            return None
        raw = await r.hget(STATUSES, name)
        return MetricStatus(_s(raw)) if raw is not None else MetricStatus.SIMPLE

    # ---------------- Loading ----------------

    async def add_metric(self, name: str) -> None:
        """Register a leaf path and every ancestor directory ('a.b.c' adds 'a.', 'a.b.', 'a.b.c')."""
        r = await self._client()
        parts = name.split(MetricTree.LEVEL_SPLITTER)
        directory = ""
        for part in parts[:-1]:
            child = f"{directory}{part}{MetricTree.LEVEL_SPLITTER}"
            await r.zadd(self._key(directory), {child: 0})
            directory = child
        await r.zadd(self._key(directory), {name: 0})

    async def is_loaded(self) -> bool:
        r = await self._client()
        return bool(await r.exists(LOADED))

    async def mark_loaded(self) -> None:
        r = await self._client()
        await r.set(LOADED, "1")
        logger.info("metric.tree.loaded")
