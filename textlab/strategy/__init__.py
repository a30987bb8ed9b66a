"""
Adaptive strategy selection for TextLab.

Components:
    StrategySelector - Picks fast/balanced/comprehensive strategies and
                       learns preferences from reported outcomes
    SynchronizedStrategySelector - Lock-protected wrapper for shared use
    PreferenceTable / PreferencePolicy - Learned adjustments and their decay/clamp
    calculate_similarity - Weighted similarity between two inputs
    score_outcome - Builds an OptimizationScore from cost and quality
"""

from .models import (
    InsightsReport,
    InvalidStrategyError,
    OptimizationScore,
    Outcome,
    Recommendation,
    RequirementSpec,
    ResourceEnvelope,
    Strategy,
    StrategyName,
    StrategyParameters,
    TextCharacteristics,
)
from .preferences import PreferencePolicy, PreferenceTable, domain_key
from .scoring import score_outcome
from .selector import StrategySelector, new_strategy_selector
from .similarity import calculate_similarity
from .synchronized import SynchronizedStrategySelector

__all__ = [
    # Models
    'TextCharacteristics',
    'RequirementSpec',
    'StrategyName',
    'StrategyParameters',
    'ResourceEnvelope',
    'Strategy',
    'OptimizationScore',
    'Outcome',
    'Recommendation',
    'InsightsReport',
    'InvalidStrategyError',
    # Preferences
    'PreferencePolicy',
    'PreferenceTable',
    'domain_key',
    # Selection
    'StrategySelector',
    'SynchronizedStrategySelector',
    'new_strategy_selector',
    'calculate_similarity',
    'score_outcome',
]
