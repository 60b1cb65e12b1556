"""In-memory stand-ins for the metric tree, the ClickHouse store and Redis."""

from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from model.metric import MetricEntry, MetricStatus, StalenessCriteria


class FakeMetricTree:
    """MetricSearch over a fixed set of leaf paths."""

    def __init__(self, leaves: Iterable[str], loaded: bool = True):
        self.leaves: Set[str] = set(leaves)
        self.loaded = loaded
        self.statuses: Dict[str, MetricStatus] = {}
        self.set_status_calls: List[Tuple[str, MetricStatus]] = []
        self.search_calls: List[str] = []

    def _children(self, directory: str) -> List[MetricEntry]:
        names = set()
        for leaf in self.leaves:
            if not leaf.startswith(directory):
                continue
            rest = leaf[len(directory):]
            head, sep, _ = rest.partition(".")
            names.add(head + sep)
        return [
            MetricEntry(
                name=directory + n,
                is_dir=n.endswith("."),
                status=self.statuses.get(directory + n, MetricStatus.SIMPLE),
            )
            for n in sorted(names)
        ]

    async def search(self, pattern: str) -> Sequence[MetricEntry]:
        self.search_calls.append(pattern)
        assert pattern.endswith("*"), pattern
        return self._children(pattern[:-1])

    async def set_status(self, name: str, status: MetricStatus) -> None:
        self.set_status_calls.append((name, status))
        current = self.statuses.get(name)
        if status.is_hidden and current is not None and current.is_hidden:
            return
        self.statuses[name] = status

    async def is_loaded(self) -> bool:
        return self.loaded

    def hidden(self) -> Set[str]:
        return {n for n, s in self.statuses.items() if s == MetricStatus.AUTO_HIDDEN}


class FakeStore:
    """StalenessStore answering from a fixed set of stale paths."""

    def __init__(self, stale: Iterable[str] = (), failures: int = 0):
        self.stale: Set[str] = set(stale)
        self.failures = failures
        self.calls: List[Tuple[str, str, StalenessCriteria]] = []
        self.fail_ranges: Set[Tuple[str, str]] = set()

    async def find_stale(
        self, min_key: str, max_key: str, criteria: StalenessCriteria
    ) -> List[str]:
        self.calls.append((min_key, max_key, criteria))
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("clickhouse unavailable")
        if (min_key, max_key) in self.fail_ranges:
            raise ConnectionError(f"range {min_key}..{max_key} keeps failing")
        return sorted(p for p in self.stale if min_key <= p <= max_key)


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeRedis:
    """The subset of redis.asyncio.Redis used by MetricTreeRepository; values come back as bytes."""

    def __init__(self):
        self.zsets: Dict[str, Dict[bytes, float]] = {}
        self.hashes: Dict[str, Dict[bytes, bytes]] = {}
        self.strings: Dict[str, bytes] = {}

    @staticmethod
    def _b(v) -> bytes:
        return v if isinstance(v, bytes) else str(v).encode("utf-8")

    async def zadd(self, name: str, mapping: Dict[str, float]) -> int:
        zset = self.zsets.setdefault(name, {})
        added = 0
        for member, score in mapping.items():
            key = self._b(member)
            if key not in zset:
                added += 1
            zset[key] = score
        return added

    async def zrangebylex(self, name: str, min: str, max: str) -> List[bytes]:
        assert (min, max) == ("-", "+")
        return sorted(self.zsets.get(name, {}))

    async def zscore(self, name: str, value: str) -> Optional[float]:
        return self.zsets.get(name, {}).get(self._b(value))

    async def hget(self, name: str, key: str) -> Optional[bytes]:
        return self.hashes.get(name, {}).get(self._b(key))

    async def hmget(self, name: str, keys: List[str]) -> List[Optional[bytes]]:
        h = self.hashes.get(name, {})
        return [h.get(self._b(k)) for k in keys]

    async def hset(self, name: str, key: str, value: str) -> int:
        h = self.hashes.setdefault(name, {})
        is_new = self._b(key) not in h
        h[self._b(key)] = self._b(value)
        return int(is_new)

    async def set(self, name: str, value: str) -> bool:
        self.strings[name] = self._b(value)
        return True

    async def exists(self, *names: str) -> int:
        return sum(1 for n in names if n in self.strings)
