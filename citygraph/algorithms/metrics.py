"""Timing and operation counters for a single algorithm run.

Each algorithm run creates a fresh `AlgorithmMetrics`, starts the timer,
bumps named counters while it works, and stops the timer before returning.
Algorithms never read their own metrics; they exist for reporting and
benchmarking.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Dict, Generator, Optional


class AlgorithmMetrics:
    """Elapsed time plus named non-negative integer counters."""

    def __init__(self) -> None:
        self._start_ns: Optional[int] = None
        self._end_ns: Optional[int] = None
        self._counters: Dict[str, int] = {}

    def start_timer(self) -> None:
        """Start (or restart) timing; clears any previous stop time."""
        self._start_ns = time.perf_counter_ns()
        self._end_ns = None

    def stop_timer(self) -> None:
        """Stop timing.

        Raises:
            RuntimeError: If the timer was never started.
        """
        if self._start_ns is None:
            raise RuntimeError("stop_timer() called before start_timer()")
        self._end_ns = time.perf_counter_ns()

    @contextmanager
    def timed(self) -> Generator[AlgorithmMetrics, None, None]:
        """Context manager that times the enclosed block.

        The timer stops even if the block raises.
        """
        self.start_timer()
        try:
            yield self
        finally:
            self.stop_timer()

    @property
    def is_running(self) -> bool:
        return self._start_ns is not None and self._end_ns is None

    @property
    def elapsed_ns(self) -> int:
        """Elapsed time in nanoseconds.

        Returns 0 when the timer was never started.

        Raises:
            RuntimeError: If the timer is still running.
        """
        if self._start_ns is None:
            return 0
        if self._end_ns is None:
            raise RuntimeError("Timer is still running; call stop_timer() first")
        return self._end_ns - self._start_ns

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed_ns / 1_000_000.0

    def increment(self, name: str, value: int = 1) -> None:
        """Add ``value`` to counter ``name``.

        Raises:
            ValueError: If ``value`` is negative; counters only grow.
        """
        if value < 0:
            raise ValueError(f"Counter increments must be non-negative, got {value}")
        self._counters[name] = self._counters.get(name, 0) + value

    def counter(self, name: str) -> int:
        """Return the value of counter ``name`` (0 if never incremented)."""
        return self._counters.get(name, 0)

    @property
    def counters(self) -> Dict[str, int]:
        """Copy of all counters, sorted by name."""
        return dict(sorted(self._counters.items()))

    def reset(self) -> None:
        self._counters.clear()
        self._start_ns = None
        self._end_ns = None

    def report(self) -> str:
        """Return a multi-line, human-readable summary."""
        lines = [
            "=== Algorithm Metrics ===",
            f"Execution Time: {self.elapsed_ms:.3f} ms ({self.elapsed_ns} ns)",
            "Counters:",
        ]
        lines.extend(f"  {name}: {value}" for name, value in self.counters.items())
        return "\n".join(lines)

    def __repr__(self) -> str:
        if self.is_running:
            return f"AlgorithmMetrics(running, counters={self.counters})"
        return f"AlgorithmMetrics(elapsed_ns={self.elapsed_ns}, counters={self.counters})"
