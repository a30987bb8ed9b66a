"""
Outcome scoring.

Turns the measured cost and self-reported quality of a call into the
OptimizationScore that StrategySelector.record_outcome() learns from.
Weights come from the caller's RequirementSpec (equal when unset).
"""

from textlab.strategy.models import OptimizationScore, RequirementSpec, Strategy
from textlab.telemetry.models import CostRecord, QualityRecord, clamp_unit


def score_outcome(
    strategy: Strategy,
    cost: CostRecord,
    quality: QualityRecord | None,
    requirements: RequirementSpec | None = None,
    user_satisfaction: float | None = None,
) -> OptimizationScore:
    """
    Score one executed strategy.

    Args:
        strategy: Strategy that ran
        cost: Measured cost of the call
        quality: Self-assessment of the call; when absent the strategy's
                 expected quality is used
        requirements: Caller constraints (time/memory budgets and weights)
        user_satisfaction: Optional explicit satisfaction in [0, 1];
                           defaults to the reported confidence

    Returns:
        OptimizationScore with every component in [0, 1]
    """
    requirements = requirements or RequirementSpec()

    if quality is not None:
        clamped = quality.clamped()
        quality_score = clamped.accuracy
        satisfaction = clamped.confidence
    else:
        quality_score = clamp_unit(strategy.expected_quality)
        satisfaction = quality_score
    if user_satisfaction is not None:
        satisfaction = clamp_unit(user_satisfaction)

    time_budget_ms = requirements.max_time_ms or strategy.resources.estimated_cpu_time_ms
    if time_budget_ms > 0:
        performance_score = clamp_unit(1 - cost.elapsed_ms / time_budget_ms)
    else:
        performance_score = 1.0

    memory_budget_mb = requirements.max_memory_mb or strategy.resources.max_memory_mb
    if memory_budget_mb > 0:
        resource_score = clamp_unit(1 - cost.peak_memory_mb / memory_budget_mb)
    else:
        resource_score = 1.0

    quality_w, speed_w, memory_w = requirements.normalized_weights()
    weighted_total = (
        quality_score * quality_w
        + performance_score * speed_w
        + resource_score * memory_w
    )

    return OptimizationScore(
        quality_score=quality_score,
        performance_score=performance_score,
        resource_score=resource_score,
        user_satisfaction=satisfaction,
        weighted_total=clamp_unit(weighted_total),
    )
