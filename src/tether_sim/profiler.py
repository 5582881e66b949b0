# MIT License (see LICENSE)
"""
Lightweight timing of simulation phases.

Cable.step reports the time spent in each of its phases (deploy, forces,
braking, solve, integrate, project) when given a Profiler.

Example:
    profiler = Profiler()
    cable = Cable(config, profiler=profiler)
    for _ in range(1000):
        cable.step(1e-4)
    print(profiler.stats.summary())
"""
from __future__ import annotations
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class ProfileStats:
    """Timing samples in seconds, keyed by section name."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        self.samples.setdefault(name, []).append(dt)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-section statistics.

        Returns:
            Dict mapping section name to:
            - 'n': sample count
            - 'mean_ms': average time in milliseconds
            - 'max_ms': maximum time in milliseconds
            - 'total_ms': summed time in milliseconds
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

    def clear(self) -> None:
        self.samples.clear()


class Profiler:
    """
    Times named sections of code with a context manager.

    Usage:
        profiler = Profiler()
        with profiler.section("solve"):
            correct_velocities(chain, dt)
    """

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)
