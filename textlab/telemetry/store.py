"""
Telemetry Store

Aggregates the CostRecord/QualityRecord pair produced by every NLP call into
per-function statistics. One store is usually shared by the whole process
(get_telemetry_store()), but stores are plain objects: tests and embedding
applications can construct their own and pass them to the collaborators.

Concurrency:
    All mutation goes through the exclusive side of a single ReadWriteLock.
    snapshot() takes the shared side and deep-copies the aggregates before
    releasing it, so callers never observe a half-applied record().

Usage:
    store = TelemetryStore()
    probe = start_probe()
    ...  # run the function
    store.record("calculate_readability", {"text_length": 1200},
                 probe.finalize(), QualityRecord(0.9, 0.9, 0.5))
    stats = store.snapshot().performance_stats["calculate_readability"]
"""

import copy
import threading
from typing import Any, Callable, Mapping, TypeVar

from textlab.logging_config import debug_log
from textlab.telemetry.cost_probe import CostProbe, start_probe
from textlab.telemetry.locks import ReadWriteLock
from textlab.telemetry.models import (
    CallParameters,
    CostRecord,
    FunctionStats,
    GlobalTelemetry,
    QualityDistribution,
    QualityRecord,
)

T = TypeVar("T")


class TelemetryStore:
    """
    Concurrency-safe aggregate of per-function call telemetry.

    Attributes are private; read through snapshot() or function_stats().
    """

    def __init__(self):
        self._lock = ReadWriteLock()
        self._telemetry = GlobalTelemetry()

    def record(
        self,
        function_name: str,
        params: CallParameters | Mapping[str, Any] | None,
        cost: CostRecord,
        quality: QualityRecord | None = None,
        error: bool = False,
    ) -> None:
        """
        Fold one call into the aggregates.

        Args:
            function_name: Name of the NLP function that ran
            params: Call parameters (structured, or a plain mapping)
            cost: CostRecord from the call's probe
            quality: Optional self-assessment; None when the function does
                     not assess itself. Out-of-range values are clamped.
            error: True if the call failed
        """
        if not isinstance(params, CallParameters):
            params = CallParameters.from_mapping(params)
        clamped = quality.clamped() if quality is not None else None

        with self._lock.write_locked():
            telemetry = self._telemetry
            telemetry.function_calls[function_name] = telemetry.function_calls.get(function_name, 0) + 1

            stats = telemetry.performance_stats.setdefault(function_name, FunctionStats())
            stats.update(cost.elapsed_seconds, cache_hits=cost.cache_hits, error=error)

            if clamped is not None:
                distribution = telemetry.quality_scores.setdefault(function_name, QualityDistribution())
                distribution.update(clamped.accuracy)

            usage = telemetry.parameter_usage.setdefault(function_name, {})
            for key in params.usage_keys():
                usage[key] = usage.get(key, 0) + 1

            telemetry.resources.add(cost)
            call_number = stats.call_count

        debug_log(
            f"[TELEMETRY] Recorded {function_name} (call #{call_number}, "
            f"{cost.elapsed_ms:.1f} ms, steps={cost.algorithm_steps}"
            f"{', error' if error else ''})"
        )

    def snapshot(self) -> GlobalTelemetry:
        """Return a deep copy of all aggregates."""
        with self._lock.read_locked():
            return copy.deepcopy(self._telemetry)

    def function_stats(self, function_name: str) -> FunctionStats | None:
        """Return a copy of one function's timing stats, or None if never recorded."""
        with self._lock.read_locked():
            stats = self._telemetry.performance_stats.get(function_name)
            return copy.deepcopy(stats) if stats is not None else None

    def reset(self) -> None:
        """Atomically replace all aggregates with empty ones."""
        with self._lock.write_locked():
            self._telemetry = GlobalTelemetry()
        debug_log("[TELEMETRY] Store reset")


# Global singleton instance
_store: TelemetryStore | None = None
_store_lock = threading.Lock()


def get_telemetry_store() -> TelemetryStore:
    """Get or create the process-wide TelemetryStore."""
    global _store
    if _store is None:
        with _store_lock:
            # Another thread may have created it while we waited
            if _store is None:
                _store = TelemetryStore()
    return _store


def record_function_call(
    function_name: str,
    params: CallParameters | Mapping[str, Any] | None,
    cost: CostRecord,
    quality: QualityRecord | None = None,
    error: bool = False,
) -> None:
    """Record a call on the process-wide store."""
    get_telemetry_store().record(function_name, params, cost, quality, error=error)


def get_global_telemetry() -> GlobalTelemetry:
    """Snapshot of the process-wide store."""
    return get_telemetry_store().snapshot()


def reset_global_telemetry() -> None:
    """Clear the process-wide store."""
    get_telemetry_store().reset()


def measure_execution(
    function_name: str,
    params: CallParameters | Mapping[str, Any] | None,
    fn: Callable[[CostProbe], T],
    store: TelemetryStore | None = None,
) -> tuple[T, CostRecord]:
    """
    Run fn under a fresh CostProbe and record the call.

    fn receives the probe so it can report steps and cache hits. If fn
    raises, the call is still recorded (with error=True) and the exception
    propagates.

    Returns:
        (result of fn, CostRecord of the call)
    """
    store = store or get_telemetry_store()
    probe = start_probe()
    try:
        result = fn(probe)
    except Exception:
        store.record(function_name, params, probe.finalize(), None, error=True)
        raise
    cost = probe.finalize()
    store.record(function_name, params, cost, None)
    return result, cost
