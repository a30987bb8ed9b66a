"""
Cost Probe

Per-call measurement scope. A probe is started when an NLP function begins,
receives step/cache counters and memory checkpoints while it runs, and is
finalized into an immutable CostRecord when it ends.

Memory is read as the process resident set size via psutil. The peak is the
highest reading taken at start, at each checkpoint and at finalize, so a
function that allocates and frees between checkpoints is not fully captured;
call sample_memory() inside hot loops when that matters.

Usage:
    probe = start_probe()
    for sentence in sentences:
        score(sentence)
        probe.increment_steps()
    probe.checkpoint("scored")
    cost = probe.finalize()
"""

import threading
import time

import psutil

from textlab.telemetry.models import CostRecord


def _read_memory_bytes() -> int:
    """Current process RSS in bytes."""
    return psutil.Process().memory_info().rss


class CostProbe:
    """
    Samples elapsed time, memory high-water mark and counters for one call.

    Probes are meant to be used by a single call path. Counters are still
    guarded by a lock so sharing a probe with a helper thread is safe.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._start_time: float | None = None
        self._baseline_memory = 0
        self._peak_memory = 0
        self._algorithm_steps = 0
        self._cache_hits = 0
        self._checkpoints: list[tuple[str, float]] = []

    @property
    def started(self) -> bool:
        return self._start_time is not None

    def start(self) -> "CostProbe":
        """Capture the baseline timestamp and memory reading."""
        memory = _read_memory_bytes()
        with self._lock:
            self._start_time = time.perf_counter()
            self._baseline_memory = memory
            self._peak_memory = memory
            self._algorithm_steps = 0
            self._cache_hits = 0
            self._checkpoints = []
        return self

    def _require_started(self):
        if self._start_time is None:
            raise RuntimeError("CostProbe has not been started. Call start() first.")

    def sample_memory(self) -> int:
        """Take a memory reading and fold it into the peak. Returns the reading."""
        memory = _read_memory_bytes()
        with self._lock:
            self._require_started()
            if memory > self._peak_memory:
                self._peak_memory = memory
        return memory

    def checkpoint(self, label: str) -> None:
        """Record a timestamped marker (and a memory sample)."""
        self.sample_memory()
        with self._lock:
            self._checkpoints.append((label, time.perf_counter() - self._start_time))

    def increment_steps(self, count: int = 1) -> None:
        with self._lock:
            self._algorithm_steps += count

    def record_cache_hit(self, count: int = 1) -> None:
        with self._lock:
            self._cache_hits += count

    def finalize(self) -> CostRecord:
        """
        Build the CostRecord for this call.

        Returns:
            CostRecord with elapsed = now - start and peak memory =
            max(readings) - baseline, floored at 0.

        Raises:
            RuntimeError: If the probe was never started
        """
        self.sample_memory()
        with self._lock:
            elapsed = time.perf_counter() - self._start_time
            return CostRecord(
                elapsed_seconds=max(elapsed, 0.0),
                peak_memory_bytes=max(self._peak_memory - self._baseline_memory, 0),
                algorithm_steps=self._algorithm_steps,
                cache_hits=self._cache_hits,
                checkpoints=tuple(self._checkpoints),
            )

    def __enter__(self):
        if not self.started:
            self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False


def start_probe() -> CostProbe:
    """Create and start a CostProbe."""
    return CostProbe().start()
