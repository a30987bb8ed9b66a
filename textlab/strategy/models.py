"""
Data structures for strategy selection and outcome feedback.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from textlab.config import STRATEGY_BUNDLES


class StrategyName(str, Enum):
    """The closed set of canonical processing strategies."""
    FAST = "fast"
    BALANCED = "balanced"
    COMPREHENSIVE = "comprehensive"


class InvalidStrategyError(ValueError):
    """Raised when a base strategy type is not one of the canonical names."""

    def __init__(self, strategy_type: str):
        self.strategy_type = strategy_type
        super().__init__(f"unknown strategy type: {strategy_type}")


@dataclass(frozen=True)
class TextCharacteristics:
    """
    Properties of one input text, used to pick a strategy.

    Attributes:
        length: Text length in characters (<= 0 means unknown)
        language: Language tag, e.g. "en"
        domain: Free-form domain tag, e.g. "technical", "social-media"
        complexity: Score in [0, 1], or None when not measured
        structure: Structure tag, e.g. "paragraph", "list"
    """
    length: int = 0
    language: str = ""
    domain: str = ""
    complexity: float | None = None
    structure: str = ""


@dataclass(frozen=True)
class RequirementSpec:
    """
    Caller constraints on a selection.

    max_time_ms and max_memory_mb use 0 for "unbounded". The three weights
    express the relative importance of quality, speed and memory when an
    outcome is scored.
    """
    min_quality: float = 0.0
    max_time_ms: float = 0
    max_memory_mb: float = 0
    quality_weight: float = 0.0
    speed_weight: float = 0.0
    memory_weight: float = 0.0

    def normalized_weights(self) -> tuple[float, float, float]:
        """(quality, speed, memory) weights summing to 1; equal when all are zero."""
        total = self.quality_weight + self.speed_weight + self.memory_weight
        if total <= 0:
            return (1 / 3, 1 / 3, 1 / 3)
        return (
            self.quality_weight / total,
            self.speed_weight / total,
            self.memory_weight / total,
        )


@dataclass
class StrategyParameters:
    """Parameters handed to the NLP collaborator."""
    depth: int
    algorithms: tuple[str, ...]
    quality: float
    streaming: bool = False
    batch_size: int | None = None


@dataclass
class ResourceEnvelope:
    """Expected resource needs of a strategy."""
    min_memory_mb: int
    max_memory_mb: int
    estimated_cpu_time_ms: float
    network_required: bool = False
    cache_recommended: bool = True


@dataclass
class Strategy:
    """A named processing strategy with its expectations."""
    name: str
    description: str
    parameters: StrategyParameters
    expected_quality: float
    expected_speed: float
    resources: ResourceEnvelope

    @classmethod
    def canonical(cls, name: StrategyName, domain: str = "") -> "Strategy":
        """Instantiate the fixed bundle for a canonical strategy name."""
        bundle = STRATEGY_BUNDLES[name.value]
        return cls(
            name=name.value,
            description=f"Optimized strategy for {domain or 'general'} text",
            parameters=StrategyParameters(
                depth=bundle["depth"],
                algorithms=tuple(bundle["algorithms"]),
                quality=bundle["quality"],
            ),
            expected_quality=bundle["expected_quality"],
            expected_speed=bundle["expected_speed"],
            resources=ResourceEnvelope(
                min_memory_mb=bundle["min_memory_mb"],
                max_memory_mb=bundle["max_memory_mb"],
                estimated_cpu_time_ms=bundle["estimated_cpu_time_ms"],
                network_required=False,
                cache_recommended=bundle["cache_recommended"],
            ),
        )

    def copy(self) -> "Strategy":
        return replace(
            self,
            parameters=replace(self.parameters),
            resources=replace(self.resources),
        )


@dataclass(frozen=True)
class OptimizationScore:
    """
    How well a strategy did on one input. All components are in [0, 1];
    weighted_total is what the preference learning consumes.
    """
    quality_score: float = 0.0
    performance_score: float = 0.0
    resource_score: float = 0.0
    user_satisfaction: float = 0.0
    weighted_total: float = 0.0


@dataclass(frozen=True)
class Outcome:
    """One recorded (input, strategy, score, success) tuple."""
    characteristics: TextCharacteristics
    strategy: Strategy
    score: OptimizationScore
    success: bool


@dataclass(frozen=True)
class Recommendation:
    strategy_name: str
    confidence: float
    expected_score: float
    rationale: str


@dataclass
class InsightsReport:
    """Summary of the selector's outcome history."""
    total_selections: int = 0
    success_rate: float = 0.0
    strategy_usage: dict[str, int] = field(default_factory=dict)
    domain_patterns: dict[str, str] = field(default_factory=dict)
    performance_trends: dict[str, list[float]] = field(default_factory=dict)
    trend_slopes: dict[str, float] = field(default_factory=dict)
