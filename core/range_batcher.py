# core/range_batcher.py
from typing import Optional


class RangeBatcher:
    """
    Collects leaf names in traversal order and keeps only the [min, max] interval.

    The interval is a superset bound: a range query over it covers every name added
    since the last reset, and may also cover unrelated names that sort in between.
    """

    def __init__(self, batch_size: int = 10_000) -> None:
        self._batch_size = int(batch_size)
        self._min: Optional[str] = None
        self._max: Optional[str] = None
        self._count = 0

    @property
    def min_key(self) -> Optional[str]:
        return self._min

    @property
    def max_key(self) -> Optional[str]:
        return self._max

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_empty(self) -> bool:
        return self._min is None

    def add(self, name: str) -> None:
        if self._count == 0:
            self._min = name
            self._max = name
        else:
            if name < self._min:
                self._min = name
            if name > self._max:
                self._max = name
        self._count += 1

    def needs_flush(self) -> bool:
        return self._count > self._batch_size

    def reset(self) -> None:
        self._min = None
        self._max = None
        self._count = 0
