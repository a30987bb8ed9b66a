"""
Tests for preference policies, the PreferenceTable and outcome scoring.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from textlab.config import load_preference_policy_config  # noqa: E402
from textlab.strategy import (  # noqa: E402
    PreferencePolicy,
    RequirementSpec,
    Strategy,
    StrategyName,
    StrategySelector,
    TextCharacteristics,
    score_outcome,
)
from textlab.strategy.preferences import PreferenceTable, domain_key  # noqa: E402
from textlab.telemetry import CostRecord, QualityRecord  # noqa: E402

MB = 1024 * 1024


def write_policy(tmp_path, body: str) -> Path:
    path = tmp_path / "preference_policy.yaml"
    path.write_text(body, encoding="utf-8")
    return path


class TestPreferencePolicy:
    """Tests for decay/clamp policies."""

    def test_default_is_unbounded(self):
        policy = PreferencePolicy()
        assert policy.decay == 1.0
        assert policy.clamp is None
        assert policy.apply(1e6, 5.0) == 1e6 + 5.0

    def test_decay(self):
        policy = PreferencePolicy(decay=0.5)
        assert policy.apply(10.0, 2.0) == pytest.approx(7.0)

    def test_clamp(self):
        policy = PreferencePolicy(clamp=20.0)
        assert policy.apply(18.0, 5.0) == 20.0
        assert policy.apply(-18.0, -5.0) == -20.0

    @pytest.mark.parametrize("kwargs", [
        {"decay": 0.0},
        {"decay": 1.5},
        {"decay": -0.1},
        {"clamp": 0.0},
        {"clamp": -3.0},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            PreferencePolicy(**kwargs)

    def test_from_config(self, tmp_path):
        path = write_policy(tmp_path, "preference_policy:\n  decay: 0.9\n  clamp: 50\n")
        policy = PreferencePolicy.from_config(path)
        assert policy == PreferencePolicy(decay=0.9, clamp=50.0)

    def test_from_config_null_clamp(self, tmp_path):
        path = write_policy(tmp_path, "preference_policy:\n  decay: 0.99\n  clamp: null\n")
        policy = PreferencePolicy.from_config(path)
        assert policy.decay == pytest.approx(0.99)
        assert policy.clamp is None

    def test_from_config_missing_file(self, tmp_path):
        assert PreferencePolicy.from_config(tmp_path / "missing.yaml") == PreferencePolicy.unbounded()

    def test_from_config_invalid_values_fall_back(self, tmp_path):
        path = write_policy(tmp_path, "preference_policy:\n  decay: 3\n")
        assert PreferencePolicy.from_config(path) == PreferencePolicy.unbounded()

    def test_from_config_non_numeric_falls_back(self, tmp_path):
        path = write_policy(tmp_path, "preference_policy:\n  decay: fast\n")
        assert PreferencePolicy.from_config(path) == PreferencePolicy.unbounded()

    def test_shipped_config_is_unbounded(self):
        assert PreferencePolicy.from_config() == PreferencePolicy.unbounded()


class TestLoadPreferencePolicyConfig:
    """Tests for the YAML loader."""

    def test_malformed_yaml_returns_empty(self, tmp_path):
        path = write_policy(tmp_path, "preference_policy: [unclosed\n")
        assert load_preference_policy_config(path) == {}

    def test_missing_section_returns_empty(self, tmp_path):
        path = write_policy(tmp_path, "something_else: 1\n")
        assert load_preference_policy_config(path) == {}

    def test_empty_file_returns_empty(self, tmp_path):
        path = write_policy(tmp_path, "")
        assert load_preference_policy_config(path) == {}


class TestPreferenceTable:
    """Tests for preference updates."""

    def test_domain_key(self):
        assert domain_key("technical", "comprehensive") == "domain_technical_comprehensive"

    def test_missing_key_reads_zero(self):
        table = PreferenceTable()
        assert table.get("fast") == 0.0
        assert "fast" not in table
        assert len(table) == 0

    def test_success_and_failure_updates(self):
        table = PreferenceTable()
        table.update_from_outcome("fast", "chat", 0.95, success=True)
        assert table.get("fast") == pytest.approx(2.5)
        assert table.get("domain_chat_fast") == pytest.approx(1.25)

        table.update_from_outcome("fast", "chat", 0.95, success=False)
        assert table.get("fast") == pytest.approx(-2.5)
        assert table.get("domain_chat_fast") == pytest.approx(-0.75)

    def test_policy_is_applied(self):
        table = PreferenceTable(PreferencePolicy(decay=0.5, clamp=4.0))
        for _ in range(10):
            table.update_from_outcome("balanced", "general", 1.0, success=True)
        # fixed point of v = v/2 + 3 is 6, clamped to 4
        assert table.get("balanced") == 4.0

    def test_clamped_preference_bounds_selection(self):
        selector = StrategySelector(policy=PreferencePolicy(clamp=10.0))
        chars = TextCharacteristics(length=2000, language="en", domain="general", complexity=0.5)
        strategy = selector.select_strategy(chars)
        for _ in range(50):
            selector.record_outcome(chars, strategy, 1.0, success=True)
        assert selector.preference("balanced") == 10.0
        assert selector.select_strategy(chars).expected_quality == pytest.approx(0.85 * 1.1)

    def test_clear(self):
        table = PreferenceTable()
        table.adjust("x", 1.0)
        table.clear()
        assert table.as_dict() == {}


class TestScoreOutcome:
    """Tests for turning cost and quality into an OptimizationScore."""

    @pytest.fixture
    def balanced(self):
        return Strategy.canonical(StrategyName.BALANCED)

    def test_equal_weights_by_default(self, balanced):
        cost = CostRecord(elapsed_seconds=0.1, peak_memory_bytes=100 * MB)
        score = score_outcome(balanced, cost, QualityRecord(0.9, 0.8, 0.5))
        assert score.quality_score == pytest.approx(0.9)
        assert score.performance_score == pytest.approx(0.5)  # 100 of 200 ms
        assert score.resource_score == pytest.approx(0.5)     # 100 of 200 MB
        assert score.user_satisfaction == pytest.approx(0.8)
        assert score.weighted_total == pytest.approx((0.9 + 0.5 + 0.5) / 3)

    def test_requirement_budgets_and_weights(self, balanced):
        cost = CostRecord(elapsed_seconds=0.025, peak_memory_bytes=10 * MB)
        requirements = RequirementSpec(max_time_ms=100, max_memory_mb=20, quality_weight=2, speed_weight=1, memory_weight=1)
        score = score_outcome(balanced, cost, QualityRecord(0.8, 0.9, 1.0), requirements)
        assert score.performance_score == pytest.approx(0.75)
        assert score.resource_score == pytest.approx(0.5)
        assert score.weighted_total == pytest.approx(0.5 * 0.8 + 0.25 * 0.75 + 0.25 * 0.5)

    def test_over_budget_scores_zero(self, balanced):
        cost = CostRecord(elapsed_seconds=5.0, peak_memory_bytes=1024 * MB)
        score = score_outcome(balanced, cost, QualityRecord(1.0, 1.0, 1.0))
        assert score.performance_score == 0.0
        assert score.resource_score == 0.0

    def test_missing_quality_uses_expectation(self, balanced):
        score = score_outcome(balanced, CostRecord(), None)
        assert score.quality_score == pytest.approx(0.85)
        assert score.user_satisfaction == pytest.approx(0.85)

    def test_out_of_range_quality_is_clamped(self, balanced):
        score = score_outcome(balanced, CostRecord(), QualityRecord(1.4, -0.2, 0.5), user_satisfaction=2.0)
        assert score.quality_score == 1.0
        assert score.user_satisfaction == 1.0
        assert 0.0 <= score.weighted_total <= 1.0
