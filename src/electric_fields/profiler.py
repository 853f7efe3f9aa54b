# MIT License (see LICENSE)
"""
Lightweight timing of recompute work.

The scheduler records the latency of every recompute (submit to result)
so tracing cost can be watched while tuning density/steps or the drag
throttle.

Example:
    profiler = Profiler()
    with profiler.section("compute_fields"):
        compute_fields(width, height, specs)
    print(profiler.stats.summary())
"""
from __future__ import annotations
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class ProfileStats:
    """Timing samples (seconds) per named section."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        self.samples.setdefault(name, []).append(dt)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-section statistics.

        Returns:
            Dict mapping section name to {'n', 'mean_ms', 'max_ms', 'total_ms'}.
        """
        out = {}
        for name, times in self.samples.items():
            total = sum(times)
            out[name] = {
                "n": len(times),
                "mean_ms": 1e3 * total / len(times),
                "max_ms": 1e3 * max(times),
                "total_ms": 1e3 * total,
            }
        return out


class Profiler:
    """
    Thread-safe section timer.

    Sections may be timed from worker threads; samples are appended under
    a lock.
    """

    def __init__(self) -> None:
        self.stats = ProfileStats()
        self._lock = threading.Lock()

    def record(self, name: str, dt: float) -> None:
        """Record an externally measured duration in seconds."""
        with self._lock:
            self.stats.add(name, dt)

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.record(name, time.perf_counter() - t0)
