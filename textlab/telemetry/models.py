"""
Data structures for call telemetry.

CostRecord and QualityRecord are produced per call (by a CostProbe and by the
NLP function itself). FunctionStats, QualityDistribution and ResourceTotals
are the aggregates kept by the TelemetryStore, and GlobalTelemetry is the
aggregate root handed out by TelemetryStore.snapshot().
"""

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from textlab.config import BYTES_PER_MB, QUALITY_BUCKET_COUNT, QUALITY_BUCKET_EDGES


def clamp_unit(value: float) -> float:
    """Clamp a score into [0, 1]; NaN becomes 0."""
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class CostRecord:
    """
    Cost of one NLP call, produced by CostProbe.finalize().

    Attributes:
        elapsed_seconds: Wall-clock time between probe start and finalize
        peak_memory_bytes: Highest sampled memory reading minus the baseline (>= 0)
        algorithm_steps: Number of algorithm steps the function reported
        cache_hits: Number of cache hits the function reported
        checkpoints: (label, offset_seconds) markers for diagnostics
    """
    elapsed_seconds: float = 0.0
    peak_memory_bytes: int = 0
    algorithm_steps: int = 0
    cache_hits: int = 0
    checkpoints: tuple[tuple[str, float], ...] = ()

    def __post_init__(self):
        if self.elapsed_seconds < 0:
            raise ValueError(f"elapsed_seconds must be >= 0, got {self.elapsed_seconds}")
        if self.peak_memory_bytes < 0 or self.algorithm_steps < 0 or self.cache_hits < 0:
            raise ValueError("CostRecord counters must be non-negative")

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_seconds * 1000

    @property
    def peak_memory_mb(self) -> float:
        return self.peak_memory_bytes / BYTES_PER_MB


@dataclass(frozen=True)
class QualityRecord:
    """
    Self-assessed quality of one NLP call.

    Values are conceptually in [0, 1]. Producers may emit values slightly
    outside that range; use clamped() before aggregating.
    """
    accuracy: float
    confidence: float
    coverage: float

    def clamped(self) -> "QualityRecord":
        return QualityRecord(
            accuracy=clamp_unit(self.accuracy),
            confidence=clamp_unit(self.confidence),
            coverage=clamp_unit(self.coverage),
        )


@dataclass(frozen=True)
class CallParameters:
    """
    Structured parameters describing one call.

    Covers the common knobs of the NLP functions; anything else goes in
    `extra` (values there are tallied only when they are scalars).
    """
    text_length: int = 0
    word_count: int = 0
    algorithms: tuple[str, ...] = ()
    depth: int | None = None
    strategy: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = ("text_length", "word_count", "algorithms", "depth", "strategy")

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any] | None) -> "CallParameters":
        """Build CallParameters from a loose mapping of call arguments."""
        if not params:
            return cls()
        algorithms = params.get("algorithms", ())
        if isinstance(algorithms, str):
            algorithms = (algorithms,)
        extra = {k: v for k, v in params.items() if k not in cls._KNOWN_KEYS}
        return cls(
            text_length=int(params.get("text_length", 0) or 0),
            word_count=int(params.get("word_count", 0) or 0),
            algorithms=tuple(algorithms or ()),
            depth=params.get("depth"),
            strategy=params.get("strategy"),
            extra=extra,
        )

    def usage_keys(self) -> list[str]:
        """
        Keys tallied in GlobalTelemetry.parameter_usage.

        Lengths and counts are continuous, so only categorical settings are
        tallied (algorithms, depth, strategy, scalar extras).
        """
        keys = [f"algorithm={name}" for name in self.algorithms]
        if self.depth is not None:
            keys.append(f"depth={self.depth}")
        if self.strategy is not None:
            keys.append(f"strategy={self.strategy}")
        for key, value in self.extra.items():
            if isinstance(value, (str, int, float, bool)):
                keys.append(f"{key}={value}")
        return keys


@dataclass
class FunctionStats:
    """
    Timing statistics for one function name.

    average_time is maintained incrementally; raw durations are not stored.
    """
    call_count: int = 0
    min_time: float = 0.0
    max_time: float = 0.0
    average_time: float = 0.0
    error_count: int = 0
    cache_hit_calls: int = 0

    def update(self, elapsed_seconds: float, cache_hits: int = 0, error: bool = False) -> None:
        """Fold one call into the statistics."""
        self.call_count += 1
        n = self.call_count
        if n == 1:
            self.min_time = elapsed_seconds
            self.max_time = elapsed_seconds
            self.average_time = elapsed_seconds
        else:
            self.min_time = min(self.min_time, elapsed_seconds)
            self.max_time = max(self.max_time, elapsed_seconds)
            self.average_time = (self.average_time * (n - 1) + elapsed_seconds) / n
        if error:
            self.error_count += 1
        if cache_hits > 0:
            self.cache_hit_calls += 1

    @property
    def cache_hit_rate(self) -> float:
        """Fraction of calls that reported at least one cache hit."""
        if self.call_count == 0:
            return 0.0
        return self.cache_hit_calls / self.call_count


def _bucket_midpoints() -> tuple[float, ...]:
    edges = QUALITY_BUCKET_EDGES
    # The last bucket only ever holds accuracy == 1.0
    return tuple((edges[i] + edges[i + 1]) / 2 for i in range(len(edges) - 1)) + (edges[-1],)


BUCKET_MIDPOINTS = _bucket_midpoints()


@dataclass
class QualityDistribution:
    """
    Accuracy distribution for one function name.

    counts[i] holds the number of calls whose clamped accuracy fell in
    bucket floor(accuracy * 5). sum(counts) equals the number of
    quality-bearing calls, and mean is the count-weighted bucket midpoint.
    """
    min: float = 0.0
    max: float = 0.0
    mean: float = 0.0
    buckets: tuple[float, ...] = QUALITY_BUCKET_EDGES
    counts: list[int] = field(default_factory=lambda: [0] * QUALITY_BUCKET_COUNT)

    @property
    def total(self) -> int:
        return sum(self.counts)

    @staticmethod
    def bucket_index(accuracy: float) -> int:
        index = int(math.floor(accuracy * 5))
        return max(0, min(index, QUALITY_BUCKET_COUNT - 1))

    def update(self, accuracy: float) -> None:
        """Add one (already clamped) accuracy value."""
        if self.total == 0:
            self.min = accuracy
            self.max = accuracy
        else:
            self.min = min(self.min, accuracy)
            self.max = max(self.max, accuracy)

        self.counts[self.bucket_index(accuracy)] += 1

        total = self.total
        weighted = sum(mid * count for mid, count in zip(BUCKET_MIDPOINTS, self.counts))
        self.mean = weighted / total if total else 0.0


@dataclass
class ResourceTotals:
    """Process-wide resource usage across every recorded call."""
    call_count: int = 0
    total_memory_bytes: int = 0
    peak_memory_bytes: int = 0
    total_cpu_time_seconds: float = 0.0
    total_algorithm_steps: int = 0
    total_cache_hits: int = 0

    def add(self, cost: CostRecord) -> None:
        self.call_count += 1
        self.total_memory_bytes += cost.peak_memory_bytes
        self.peak_memory_bytes = max(self.peak_memory_bytes, cost.peak_memory_bytes)
        self.total_cpu_time_seconds += cost.elapsed_seconds
        self.total_algorithm_steps += cost.algorithm_steps
        self.total_cache_hits += cost.cache_hits

    @property
    def average_memory_bytes(self) -> float:
        return self.total_memory_bytes / max(self.call_count, 1)

    @property
    def average_cpu_time_seconds(self) -> float:
        return self.total_cpu_time_seconds / max(self.call_count, 1)

    @property
    def cache_hit_rate(self) -> float:
        """Cache hits per unit of work (hits + steps)."""
        work = self.total_cache_hits + self.total_algorithm_steps
        if work == 0:
            return 0.0
        return self.total_cache_hits / work


@dataclass
class GlobalTelemetry:
    """
    Aggregate root for all recorded calls.

    Only TelemetryStore mutates instances it owns; snapshots handed to
    callers are independent deep copies.
    """
    function_calls: dict[str, int] = field(default_factory=dict)
    performance_stats: dict[str, FunctionStats] = field(default_factory=dict)
    quality_scores: dict[str, QualityDistribution] = field(default_factory=dict)
    parameter_usage: dict[str, dict[str, int]] = field(default_factory=dict)
    resources: ResourceTotals = field(default_factory=ResourceTotals)

    @property
    def total_calls(self) -> int:
        return sum(self.function_calls.values())

    def is_empty(self) -> bool:
        return (
            not self.function_calls
            and not self.performance_stats
            and not self.quality_scores
            and not self.parameter_usage
            and self.resources == ResourceTotals()
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict view, e.g. for JSON export or logging."""
        return {
            "function_calls": dict(self.function_calls),
            "performance_stats": {
                name: {
                    "call_count": s.call_count,
                    "min_time": s.min_time,
                    "max_time": s.max_time,
                    "average_time": s.average_time,
                    "error_count": s.error_count,
                    "cache_hit_rate": s.cache_hit_rate,
                }
                for name, s in self.performance_stats.items()
            },
            "quality_scores": {
                name: {
                    "min": d.min,
                    "max": d.max,
                    "mean": d.mean,
                    "buckets": list(d.buckets),
                    "counts": list(d.counts),
                }
                for name, d in self.quality_scores.items()
            },
            "parameter_usage": {name: dict(u) for name, u in self.parameter_usage.items()},
            "resource_usage": {
                "total_memory_mb": self.resources.total_memory_bytes // BYTES_PER_MB,
                "average_memory_mb": self.resources.average_memory_bytes / BYTES_PER_MB,
                "peak_memory_mb": self.resources.peak_memory_bytes // BYTES_PER_MB,
                "total_cpu_time_ms": self.resources.total_cpu_time_seconds * 1000,
                "average_cpu_time_ms": self.resources.average_cpu_time_seconds * 1000,
                "cache_hit_rate": self.resources.cache_hit_rate,
            },
        }
