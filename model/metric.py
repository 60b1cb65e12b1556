# model/metric.py
from datetime import timedelta
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class MetricStatus(str, Enum):
    SIMPLE = "SIMPLE"
    BAN = "BAN"
    APPROVED = "APPROVED"
    HIDDEN = "HIDDEN"
    AUTO_HIDDEN = "AUTO_HIDDEN"

    @property
    def is_hidden(self) -> bool:
        return self in (MetricStatus.BAN, MetricStatus.HIDDEN, MetricStatus.AUTO_HIDDEN)


class MetricEntry(BaseModel):
    """One search result: a directory (name ends with '.') or a leaf metric."""

    model_config = ConfigDict(frozen=True)

    name: str
    is_dir: bool = False
    status: MetricStatus = MetricStatus.SIMPLE


class StalenessCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Stale = fewer than max_values_count points AND last point older than today - missing_days
    max_values_count: int = Field(default=200, ge=1)
    missing_days: int = Field(default=7, ge=0)


class RetryPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    attempts: int = Field(default=10, ge=1)
    wait: timedelta = timedelta(seconds=5)
