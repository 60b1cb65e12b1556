# core/protocols.py
from typing import List, Protocol, Sequence, runtime_checkable
from model.metric import MetricEntry, MetricStatus, StalenessCriteria


@runtime_checkable
class MetricSearch(Protocol):
    """
    Namespace collaborator the autohide pass walks and mutates.

    - search(pattern): entries directly under a one-level pattern ("*", "a.b.*"),
      ascending by name; directory names end with ".".
    - set_status(name, status): idempotent, no-op if the metric is already hidden.
    - is_loaded(): readiness gate, false until the tree is fully populated.
    """

    async def search(self, pattern: str) -> Sequence[MetricEntry]: ...

    async def set_status(self, name: str, status: MetricStatus) -> None: ...

    async def is_loaded(self) -> bool: ...


@runtime_checkable
class StalenessStore(Protocol):
    """Analytical store answering "which paths in [min, max] are stale?". Pure read, safe to retry."""

    async def find_stale(
        self, min_key: str, max_key: str, criteria: StalenessCriteria
    ) -> List[str]: ...
