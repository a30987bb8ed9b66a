"""
TextLab: text analysis with adaptive strategy selection and call telemetry.

    from textlab import new_strategy_selector, TextCharacteristics, RequirementSpec

    selector = new_strategy_selector()
    strategy = selector.select_strategy(
        TextCharacteristics(length=2000, language="en", domain="general", complexity=0.5),
        RequirementSpec(min_quality=0.8),
    )
"""

from textlab.strategy import (
    InsightsReport,
    InvalidStrategyError,
    OptimizationScore,
    Outcome,
    PreferencePolicy,
    Recommendation,
    RequirementSpec,
    Strategy,
    StrategyName,
    StrategySelector,
    SynchronizedStrategySelector,
    TextCharacteristics,
    calculate_similarity,
    new_strategy_selector,
    score_outcome,
)
from textlab.telemetry import (
    CallParameters,
    CostProbe,
    CostRecord,
    GlobalTelemetry,
    QualityRecord,
    TelemetryStore,
    get_global_telemetry,
    get_telemetry_store,
    measure_execution,
    record_function_call,
    reset_global_telemetry,
    start_probe,
)

__version__ = "0.1.0"

__all__ = [
    'CallParameters',
    'CostProbe',
    'CostRecord',
    'GlobalTelemetry',
    'QualityRecord',
    'TelemetryStore',
    'start_probe',
    'get_telemetry_store',
    'record_function_call',
    'get_global_telemetry',
    'reset_global_telemetry',
    'measure_execution',
    'InsightsReport',
    'InvalidStrategyError',
    'OptimizationScore',
    'Outcome',
    'PreferencePolicy',
    'Recommendation',
    'RequirementSpec',
    'Strategy',
    'StrategyName',
    'StrategySelector',
    'SynchronizedStrategySelector',
    'TextCharacteristics',
    'calculate_similarity',
    'new_strategy_selector',
    'score_outcome',
]
