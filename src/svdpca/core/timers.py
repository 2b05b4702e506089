from __future__ import annotations

import logging
import time
from contextlib import contextmanager


class Timer:
    def __init__(self):
        self.reset()

    def reset(self):
        self._t0 = time.perf_counter()

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self._t0

    def __repr__(self) -> str:
        return f"{self.elapsed:.3f}s"


@contextmanager
def timed(label: str, log: logging.Logger | None = None):
    t = Timer()
    yield t
    (log or logging.getLogger("svdpca")).debug(f"[timer] {label}: {t.elapsed:.3f}s")
