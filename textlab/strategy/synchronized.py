"""
Thread-safe wrapper around StrategySelector.

StrategySelector itself is single-owner. When one selector has to be shared
between worker threads, wrap it here instead of adding locks to the learning
logic. select_strategy() reads the preferences that record_outcome()
mutates, so both take the exclusive side of the lock; the read-only
retrieval methods share it.
"""

from textlab.strategy.models import (
    InsightsReport,
    OptimizationScore,
    Outcome,
    Recommendation,
    RequirementSpec,
    Strategy,
    TextCharacteristics,
)
from textlab.strategy.selector import StrategySelector
from textlab.telemetry.locks import ReadWriteLock


class SynchronizedStrategySelector:
    """Serializes access to a wrapped StrategySelector."""

    def __init__(self, selector: StrategySelector | None = None):
        self._selector = selector or StrategySelector()
        self._lock = ReadWriteLock()

    def select_strategy(
        self,
        characteristics: TextCharacteristics,
        requirements: RequirementSpec | None = None,
    ) -> Strategy:
        with self._lock.write_locked():
            return self._selector.select_strategy(characteristics, requirements)

    def record_outcome(
        self,
        characteristics: TextCharacteristics,
        strategy: Strategy,
        score: OptimizationScore | float,
        success: bool,
    ) -> Outcome:
        with self._lock.write_locked():
            return self._selector.record_outcome(characteristics, strategy, score, success)

    def find_similar_outcomes(self, characteristics: TextCharacteristics) -> list[Outcome]:
        with self._lock.read_locked():
            return self._selector.find_similar_outcomes(characteristics)

    def get_recommendations(self, characteristics: TextCharacteristics) -> list[Recommendation]:
        with self._lock.read_locked():
            return self._selector.get_recommendations(characteristics)

    def get_insights(self) -> InsightsReport:
        with self._lock.read_locked():
            return self._selector.get_insights()

    @property
    def history(self) -> tuple[Outcome, ...]:
        with self._lock.read_locked():
            return self._selector.history

    @property
    def preferences(self) -> dict[str, float]:
        with self._lock.read_locked():
            return self._selector.preferences

    def preference(self, key: str) -> float:
        with self._lock.read_locked():
            return self._selector.preference(key)

    def reset(self) -> None:
        with self._lock.write_locked():
            self._selector.reset()
