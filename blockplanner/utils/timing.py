"""Timing utilities for planner profiling."""

from contextlib import contextmanager
from collections import defaultdict
import time
from typing import Dict, Any


class Timer:
    """Accumulates wall-clock time per label.

    Usage:
        timer = Timer()
        with timer.measure("search"):
            result = strategy.search(...)
        print(timer.last("search"))
    """

    def __init__(self):
        self.times: Dict[str, float] = defaultdict(float)
        self.counts: Dict[str, int] = defaultdict(int)
        self._last: Dict[str, float] = {}

    @contextmanager
    def measure(self, name: str):
        """Time a block under `name`, even if it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.times[name] += elapsed
            self.counts[name] += 1
            self._last[name] = elapsed

    def last(self, name: str) -> float:
        """Duration of the most recent block measured under `name`."""
        return self._last.get(name, 0.0)

    def summary(self) -> Dict[str, Dict[str, Any]]:
        """Totals, counts and averages per label."""
        return {
            name: {
                "total_sec": self.times[name],
                "count": self.counts[name],
                "avg_ms": (self.times[name] / self.counts[name] * 1000) if self.counts[name] > 0 else 0,
            }
            for name in sorted(self.times.keys())
        }

    def reset(self):
        self.times.clear()
        self.counts.clear()
        self._last.clear()
