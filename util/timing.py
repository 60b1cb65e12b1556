# util/timing.py
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator
import logging


def elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)


@dataclass
class Span:
    ms: int = 0


@contextmanager
def timed(logger: logging.Logger, name: str, **kv: Any) -> Iterator[Span]:
    """
    Usage:
      with timed(logger, "autohide.pass") as span:
          ...
      span.ms  # filled in on exit
    Emits one INFO on exit: "<name>.done ms=<int> key=val ..."
    """
    span = Span()
    t0 = time.perf_counter()
    try:
        yield span
    finally:
        span.ms = elapsed_ms(t0)
        suffix = "".join(f" {k}={v}" for k, v in kv.items())
        logger.info("%s.done ms=%d%s", name, span.ms, suffix)
