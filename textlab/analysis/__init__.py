"""
Text analysis functions that report cost and quality to the telemetry store.

Components:
    calculate_readability - Readability formulas, budgeted by algorithm list
    profile_text - TextCharacteristics for strategy selection
    AdaptiveAnalyzer - Select/execute/record/feedback loop around readability
"""

from .characteristics import detect_structure, estimate_complexity, guess_domain, profile_text
from .pipeline import AdaptiveAnalyzer, AnalysisResult
from .readability import ReadabilityReport, calculate_readability
from .text_stats import TextStats, compute_text_stats, count_syllables, split_sentences, split_words

__all__ = [
    'calculate_readability',
    'ReadabilityReport',
    'profile_text',
    'guess_domain',
    'estimate_complexity',
    'detect_structure',
    'AdaptiveAnalyzer',
    'AnalysisResult',
    'TextStats',
    'compute_text_stats',
    'count_syllables',
    'split_sentences',
    'split_words',
]
