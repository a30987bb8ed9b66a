"""
Integration tests for the AdaptiveAnalyzer feedback loop.

Each test uses its own TelemetryStore and StrategySelector so results do not
depend on test order.
"""

import sys
import threading
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from textlab.analysis import AdaptiveAnalyzer, AnalysisResult  # noqa: E402
from textlab.analysis.readability import FUNCTION_NAME  # noqa: E402
from textlab.strategy import (  # noqa: E402
    RequirementSpec,
    StrategySelector,
    SynchronizedStrategySelector,
)
from textlab.telemetry import TelemetryStore  # noqa: E402

# ~2250 characters of plain prose -> balanced strategy
MEDIUM_TEXT = "The quick brown fox jumps over the lazy dog. " * 50


@pytest.fixture
def store():
    return TelemetryStore()


@pytest.fixture
def selector():
    return StrategySelector()


@pytest.fixture
def analyzer(selector, store):
    return AdaptiveAnalyzer(selector=selector, store=store)


class TestAdaptiveAnalyzer:
    """Tests for the select/execute/record/feedback loop."""

    def test_analyze_medium_text(self, analyzer, selector, store):
        result = analyzer.analyze(MEDIUM_TEXT)

        assert isinstance(result, AnalysisResult)
        assert result.characteristics.domain == "general"
        assert result.strategy.name == "balanced"
        assert set(result.report.scores) == {"flesch", "gunning-fog", "coleman-liau", "ari"}
        assert result.success is True
        assert 0.5 <= result.score.weighted_total <= 1.0

        assert store.snapshot().function_calls[FUNCTION_NAME] == 1
        assert len(selector.history) == 1
        assert selector.history[0].success is True
        assert selector.preference("balanced") > 0

    def test_short_text_uses_fast_strategy(self, analyzer):
        result = analyzer.analyze("Hi there.")
        assert result.strategy.name == "fast"
        assert set(result.report.scores) == {"flesch", "gunning-fog"}

    def test_domain_override_selects_comprehensive(self, analyzer):
        result = analyzer.analyze(MEDIUM_TEXT, domain="technical")
        assert result.characteristics.domain == "technical"
        assert result.strategy.name == "comprehensive"
        assert len(result.report.scores) == 6

    def test_unreachable_quality_floor_is_a_failure(self, analyzer, selector):
        result = analyzer.analyze(MEDIUM_TEXT, RequirementSpec(min_quality=0.99))
        assert result.strategy.parameters.depth == 3
        assert result.success is False
        assert selector.preference("balanced") == pytest.approx(-5.0)

    def test_empty_text_is_a_failure_without_telemetry(self, analyzer, selector, store):
        result = analyzer.analyze("")
        assert result.strategy.name == "fast"
        assert result.report.scores == {}
        assert result.success is False
        assert store.snapshot().is_empty()
        assert selector.preference("fast") == pytest.approx(-5.0)

    def test_learning_can_be_disabled(self, selector, store):
        analyzer = AdaptiveAnalyzer(selector=selector, store=store, learn=False)
        analyzer.analyze(MEDIUM_TEXT)
        assert selector.history == ()
        assert store.snapshot().function_calls[FUNCTION_NAME] == 1

    def test_repeated_runs_build_recommendations(self, analyzer, selector):
        for _ in range(3):
            analyzer.analyze(MEDIUM_TEXT)
        chars = selector.history[0].characteristics
        (recommendation,) = selector.get_recommendations(chars)
        assert recommendation.strategy_name == "balanced"
        assert recommendation.confidence == pytest.approx(0.3)
        assert selector.get_insights().success_rate == 1.0

    def test_shared_selector_across_threads(self, store):
        shared = SynchronizedStrategySelector()
        errors = []

        def worker():
            analyzer = AdaptiveAnalyzer(selector=shared, store=store)
            try:
                for _ in range(5):
                    analyzer.analyze(MEDIUM_TEXT)
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(shared.history) == 20
        assert store.snapshot().function_calls[FUNCTION_NAME] == 20
