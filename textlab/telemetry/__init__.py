"""
Call telemetry for TextLab.

Components:
    CostProbe - Per-call measurement of time, memory and counters
    TelemetryStore - Process-wide, thread-safe aggregate of call telemetry
    ReadWriteLock - Shared/exclusive lock guarding the store

Every NLP function starts a probe, finalizes it into a CostRecord and hands
that (plus an optional QualityRecord) to record_function_call().
"""

from .cost_probe import CostProbe, start_probe
from .locks import ReadWriteLock
from .models import (
    CallParameters,
    CostRecord,
    FunctionStats,
    GlobalTelemetry,
    QualityDistribution,
    QualityRecord,
    ResourceTotals,
)
from .store import (
    TelemetryStore,
    get_global_telemetry,
    get_telemetry_store,
    measure_execution,
    record_function_call,
    reset_global_telemetry,
)

__all__ = [
    # Probe
    'CostProbe',
    'start_probe',
    # Records and aggregates
    'CallParameters',
    'CostRecord',
    'QualityRecord',
    'FunctionStats',
    'QualityDistribution',
    'ResourceTotals',
    'GlobalTelemetry',
    # Store
    'ReadWriteLock',
    'TelemetryStore',
    'get_telemetry_store',
    'record_function_call',
    'get_global_telemetry',
    'reset_global_telemetry',
    'measure_execution',
]
