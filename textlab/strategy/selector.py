"""
Strategy Selector

Chooses a processing strategy (fast / balanced / comprehensive) for a text
and learns from reported outcomes which strategies work for which inputs.

Selection runs in four steps:
1. Pick a base strategy from length, complexity and domain thresholds
2. Instantiate that strategy's canonical parameter bundle
3. Adjust depth, algorithms and resource envelope for the caller's
   RequirementSpec
4. Scale expected quality/speed by the learned preference for the strategy

Outcomes reported through record_outcome() feed a bounded FIFO history
(1000 entries) and the PreferenceTable. The history also backs
similarity-based recommendations and the insights report.

Thread safety:
    A StrategySelector is meant to have a single owner. History and
    preferences are not synchronized; wrap the selector in
    SynchronizedStrategySelector when several threads share it.

Example:
    selector = new_strategy_selector()
    chars = TextCharacteristics(length=2000, language="en", domain="general", complexity=0.5)
    strategy = selector.select_strategy(chars, RequirementSpec(min_quality=0.8))
    ...  # run the NLP function with strategy.parameters
    selector.record_outcome(chars, strategy, score, success=True)
"""

from collections import defaultdict, deque

import numpy as np

from textlab.config import (
    COMPREHENSIVE_DOMAINS,
    COMPREHENSIVE_MIN_COMPLEXITY,
    COMPREHENSIVE_MIN_LENGTH,
    FAST_DOMAINS,
    FAST_MAX_LENGTH,
    MAX_DEPTH,
    MAX_EXPECTED_QUALITY,
    MAX_EXPECTED_SPEED,
    MIN_DEPTH,
    OUTCOME_HISTORY_LIMIT,
    PREFERENCE_SCALE,
    PREFERENCE_SPEED_TRADEOFF,
    QUALITY_BOOST,
    RECOMMENDATION_FULL_CONFIDENCE_COUNT,
    SIMILARITY_THRESHOLD,
    SPEED_BOOST,
    STREAMING_BATCH_SIZE,
    TIME_BUDGET_CPU_FACTOR,
    TIME_BUDGET_MAX_ALGORITHMS,
)
from textlab.logging_config import debug_log, error
from textlab.strategy.models import (
    InsightsReport,
    InvalidStrategyError,
    OptimizationScore,
    Outcome,
    Recommendation,
    RequirementSpec,
    Strategy,
    StrategyName,
    TextCharacteristics,
)
from textlab.strategy.preferences import PreferencePolicy, PreferenceTable
from textlab.strategy.similarity import calculate_similarity


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


class StrategySelector:
    """
    Selects processing strategies and learns preferences from outcomes.

    Args:
        policy: Optional PreferencePolicy (decay/clamp). Defaults to
                unbounded preferences.
        history_limit: Maximum number of outcomes kept (oldest evicted first).
    """

    def __init__(self, policy: PreferencePolicy | None = None, history_limit: int = OUTCOME_HISTORY_LIMIT):
        self._history: deque[Outcome] = deque(maxlen=history_limit)
        self._preferences = PreferenceTable(policy)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def history(self) -> tuple[Outcome, ...]:
        """Recorded outcomes, oldest first."""
        return tuple(self._history)

    @property
    def preferences(self) -> dict[str, float]:
        return self._preferences.as_dict()

    def preference(self, key: str) -> float:
        return self._preferences.get(key)

    @property
    def policy(self) -> PreferencePolicy:
        return self._preferences.policy

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_strategy(
        self,
        characteristics: TextCharacteristics,
        requirements: RequirementSpec | None = None,
    ) -> Strategy:
        """
        Select the strategy for one input.

        Args:
            characteristics: Properties of the text to process
            requirements: Caller constraints; defaults to no constraints

        Returns:
            The adjusted Strategy

        Raises:
            InvalidStrategyError: If the base heuristic produced a name
                outside {fast, balanced, comprehensive}
        """
        requirements = requirements or RequirementSpec()
        strategy_type = self._determine_strategy_type(characteristics)

        try:
            name = StrategyName(strategy_type)
        except ValueError:
            error(f"[SELECTOR] Base heuristic produced unknown strategy '{strategy_type}'")
            raise InvalidStrategyError(strategy_type) from None

        strategy = Strategy.canonical(name, characteristics.domain)
        self._adjust_for_requirements(strategy, requirements)
        self._apply_learned_preferences(strategy)

        debug_log(
            f"[SELECTOR] Selected '{strategy.name}' for length={characteristics.length}, "
            f"domain={characteristics.domain!r} (depth={strategy.parameters.depth}, "
            f"quality={strategy.expected_quality:.2f}, speed={strategy.expected_speed:.2f})"
        )
        return strategy

    def _determine_strategy_type(self, characteristics: TextCharacteristics) -> str:
        """Base strategy from thresholds; first match wins."""
        complexity = characteristics.complexity or 0.0

        if characteristics.length < FAST_MAX_LENGTH:
            return StrategyName.FAST.value
        if characteristics.length > COMPREHENSIVE_MIN_LENGTH or complexity > COMPREHENSIVE_MIN_COMPLEXITY:
            return StrategyName.COMPREHENSIVE.value
        if characteristics.domain in COMPREHENSIVE_DOMAINS:
            return StrategyName.COMPREHENSIVE.value
        if characteristics.domain in FAST_DOMAINS:
            return StrategyName.FAST.value
        return StrategyName.BALANCED.value

    def _adjust_for_requirements(self, strategy: Strategy, requirements: RequirementSpec) -> None:
        params = strategy.parameters
        resources = strategy.resources

        # Quality floor: go one level deeper
        if requirements.min_quality > strategy.expected_quality:
            if params.depth < MAX_DEPTH:
                params.depth += 1
                strategy.expected_quality = min(strategy.expected_quality + QUALITY_BOOST, MAX_EXPECTED_QUALITY)
            params.quality = max(params.quality, requirements.min_quality)

        # Time budget: go one level shallower and run fewer algorithms
        if requirements.max_time_ms > 0 and resources.estimated_cpu_time_ms > requirements.max_time_ms:
            if params.depth > MIN_DEPTH:
                params.depth -= 1
                strategy.expected_speed = min(strategy.expected_speed + SPEED_BOOST, MAX_EXPECTED_SPEED)
                resources.estimated_cpu_time_ms *= TIME_BUDGET_CPU_FACTOR
            if len(params.algorithms) > TIME_BUDGET_MAX_ALGORITHMS:
                params.algorithms = params.algorithms[:TIME_BUDGET_MAX_ALGORITHMS]

        # Memory budget: clamp the envelope and stream in batches
        if requirements.max_memory_mb > 0 and resources.max_memory_mb > requirements.max_memory_mb:
            resources.max_memory_mb = int(requirements.max_memory_mb)
            resources.min_memory_mb = min(resources.min_memory_mb, resources.max_memory_mb)
            params.streaming = True
            params.batch_size = STREAMING_BATCH_SIZE

    def _apply_learned_preferences(self, strategy: Strategy) -> None:
        if strategy.name not in self._preferences:
            return
        adjustment = self._preferences.get(strategy.name) / PREFERENCE_SCALE
        # Quality gains trade off against speed
        strategy.expected_quality = _clamp_unit(strategy.expected_quality * (1 + adjustment))
        strategy.expected_speed = _clamp_unit(
            strategy.expected_speed * (1 - adjustment * PREFERENCE_SPEED_TRADEOFF)
        )

    # ------------------------------------------------------------------
    # Outcome feedback
    # ------------------------------------------------------------------

    def record_outcome(
        self,
        characteristics: TextCharacteristics,
        strategy: Strategy,
        score: OptimizationScore | float,
        success: bool,
    ) -> Outcome:
        """
        Record how a selected strategy performed.

        Args:
            characteristics: The input the strategy was selected for
            strategy: The strategy that ran
            score: OptimizationScore (or its weighted total as a float)
            success: Whether the caller judged the result satisfactory

        Returns:
            The stored Outcome
        """
        if not isinstance(score, OptimizationScore):
            score = OptimizationScore(weighted_total=float(score))

        outcome = Outcome(
            characteristics=characteristics,
            strategy=strategy.copy(),
            score=score,
            success=success,
        )
        # deque(maxlen) evicts the oldest entry once the limit is reached
        self._history.append(outcome)
        self._preferences.update_from_outcome(
            strategy.name, characteristics.domain, score.weighted_total, success
        )
        return outcome

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def calculate_similarity(self, a: TextCharacteristics, b: TextCharacteristics) -> float:
        return calculate_similarity(a, b)

    def find_similar_outcomes(self, characteristics: TextCharacteristics) -> list[Outcome]:
        """Outcomes whose input is more than 70% similar, oldest first."""
        return [
            outcome for outcome in self._history
            if calculate_similarity(characteristics, outcome.characteristics) > SIMILARITY_THRESHOLD
        ]

    def get_recommendations(self, characteristics: TextCharacteristics) -> list[Recommendation]:
        """
        Recommend strategies that succeeded on similar inputs.

        Returns:
            One Recommendation per strategy with similar successful
            outcomes, best expected score first. Empty when nothing similar
            has succeeded.
        """
        scores_by_strategy: dict[str, list[float]] = defaultdict(list)
        for outcome in self.find_similar_outcomes(characteristics):
            if outcome.success:
                scores_by_strategy[outcome.strategy.name].append(outcome.score.weighted_total)

        recommendations = []
        for name, scores in scores_by_strategy.items():
            recommendations.append(Recommendation(
                strategy_name=name,
                confidence=min(len(scores) / RECOMMENDATION_FULL_CONFIDENCE_COUNT, 1.0),
                expected_score=sum(scores) / len(scores),
                rationale=f"Based on {len(scores)} similar successful outcomes",
            ))

        recommendations.sort(key=lambda r: (-r.expected_score, r.strategy_name))
        return recommendations

    def get_insights(self) -> InsightsReport:
        """Usage counts, success rate, best strategy per domain and score trends."""
        report = InsightsReport(total_selections=len(self._history))
        if not self._history:
            return report

        domain_counts: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        success_count = 0

        for outcome in self._history:
            name = outcome.strategy.name
            report.strategy_usage[name] = report.strategy_usage.get(name, 0) + 1
            if outcome.success:
                success_count += 1
                report.performance_trends.setdefault(name, []).append(outcome.score.weighted_total)
                domain_counts[outcome.characteristics.domain][name] += 1

        for domain, counts in domain_counts.items():
            # Highest count wins; ties go to the alphabetically first name
            report.domain_patterns[domain] = min(counts, key=lambda n: (-counts[n], n))

        report.success_rate = success_count / report.total_selections
        report.trend_slopes = {
            name: self._trend_slope(scores) for name, scores in report.performance_trends.items()
        }
        return report

    @staticmethod
    def _trend_slope(scores: list[float]) -> float:
        """Least-squares slope of scores over their position; 0 for fewer than two points."""
        if len(scores) < 2:
            return 0.0
        x = np.column_stack([np.ones(len(scores)), np.arange(len(scores), dtype=float)])
        beta = np.linalg.lstsq(x, np.asarray(scores, dtype=float), rcond=None)[0]
        return float(beta[1])

    def reset(self) -> None:
        """Forget all outcomes and learned preferences."""
        self._history.clear()
        self._preferences.clear()


def new_strategy_selector(policy: PreferencePolicy | None = None) -> StrategySelector:
    """Create a StrategySelector with an empty history."""
    return StrategySelector(policy=policy)
