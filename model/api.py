# model/api.py
from datetime import datetime
from typing import Literal
from pydantic import BaseModel
from model.metric import MetricStatus

PassStatus = Literal["finished", "failed", "skipped", "cancelled"]


class HideOutcome(BaseModel):
    status: PassStatus
    hidden: int = 0
    started_at: datetime
    duration_ms: int = 0
    error: str | None = None


class AutohideStatusResponse(BaseModel):
    enabled: bool
    running: bool
    nextRunAt: datetime | None = None
    lastOutcome: HideOutcome | None = None


class TriggerResponse(BaseModel):
    ok: bool


class MetricStatusResponse(BaseModel):
    name: str
    status: MetricStatus
