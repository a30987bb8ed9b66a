"""
Readability Analysis

Computes classic readability formulas for a text. The set of formulas is
the "budget" knob: strategies pass a short list for fast runs and "all" for
comprehensive ones.

Available algorithms:
- flesch: Flesch Reading Ease (0-100, higher is easier)
- flesch-kincaid: Flesch-Kincaid Grade Level
- gunning-fog: Gunning Fog Index
- coleman-liau: Coleman-Liau Index
- ari: Automated Readability Index
- smog: SMOG grade (estimated from Gunning Fog below 30 sentences)
- all: every algorithm above

Each call runs under a CostProbe and is recorded in the telemetry store as
"calculate_readability" together with a QualityRecord.
"""

import math
from dataclasses import dataclass, field

from textlab.config import READABILITY_ALGORITHMS, READABILITY_DEFAULT_ALGORITHMS, SMOG_MIN_SENTENCES
from textlab.logging_config import debug_log
from textlab.telemetry import (
    CallParameters,
    CostProbe,
    CostRecord,
    QualityRecord,
    TelemetryStore,
    get_telemetry_store,
    start_probe,
)
from textlab.analysis.text_stats import TextStats, compute_text_stats

FUNCTION_NAME = "calculate_readability"

# Formulas whose result is a US grade level
GRADE_LEVEL_ALGORITHMS = ("flesch-kincaid", "gunning-fog", "coleman-liau", "ari", "smog")


@dataclass
class ReadabilityReport:
    """
    Result of calculate_readability().

    Attributes:
        scores: algorithm name -> score
        estimated: algorithms whose score is an approximation
        recommendation: Plain-language reading level summary
        target_audience: Audiences the text suits
        improvement_suggestions: Suggestions to make the text easier to read
        cost: Measured cost of the call
        quality: Self-assessment recorded with the call
    """
    scores: dict[str, float] = field(default_factory=dict)
    estimated: set[str] = field(default_factory=set)
    recommendation: str = ""
    target_audience: list[str] = field(default_factory=list)
    improvement_suggestions: list[str] = field(default_factory=list)
    cost: CostRecord = field(default_factory=CostRecord)
    quality: QualityRecord | None = None


def flesch_reading_ease(stats: TextStats) -> float:
    score = 206.835 - 1.015 * stats.avg_words_per_sentence - 84.6 * stats.avg_syllables_per_word
    return max(0.0, min(100.0, score))


def flesch_kincaid_grade(stats: TextStats) -> float:
    return 0.39 * stats.avg_words_per_sentence + 11.8 * stats.avg_syllables_per_word - 15.59


def gunning_fog(stats: TextStats) -> float:
    return 0.4 * (stats.avg_words_per_sentence + 100 * stats.complex_word_ratio)


def coleman_liau(stats: TextStats) -> float:
    letters_per_100 = stats.avg_chars_per_word * 100
    sentences_per_100 = 100.0 / max(stats.avg_words_per_sentence, 1e-9)
    return 0.0588 * letters_per_100 - 0.296 * sentences_per_100 - 15.8


def automated_readability_index(stats: TextStats) -> float:
    return 4.71 * stats.avg_chars_per_word + 0.5 * stats.avg_words_per_sentence - 21.43


def smog_grade(stats: TextStats) -> tuple[float, bool]:
    """Returns (score, estimated)."""
    if stats.sentences >= SMOG_MIN_SENTENCES:
        return 1.0430 * math.sqrt(stats.complex_words * 30 / stats.sentences) + 3.1291, False
    return gunning_fog(stats) * 1.1, True


_FORMULAS = {
    "flesch": flesch_reading_ease,
    "flesch-kincaid": flesch_kincaid_grade,
    "gunning-fog": gunning_fog,
    "coleman-liau": coleman_liau,
    "ari": automated_readability_index,
}


def resolve_algorithms(algorithms) -> tuple[str, ...]:
    """Expand 'all', drop unknown names, fall back to the defaults."""
    if not algorithms:
        return READABILITY_DEFAULT_ALGORITHMS
    if "all" in algorithms:
        return READABILITY_ALGORITHMS
    resolved = tuple(a for a in algorithms if a in READABILITY_ALGORITHMS)
    unknown = [a for a in algorithms if a not in READABILITY_ALGORITHMS]
    if unknown:
        debug_log(f"[READABILITY] Ignoring unknown algorithms: {unknown}")
    return resolved or READABILITY_DEFAULT_ALGORITHMS


def calculate_readability(
    text: str,
    algorithms=None,
    probe: CostProbe | None = None,
    store: TelemetryStore | None = None,
) -> ReadabilityReport:
    """
    Score the readability of a text.

    Args:
        text: Text to analyze
        algorithms: Algorithm names (see module docstring); defaults to
                    flesch and gunning-fog
        probe: Optional already-started probe (e.g. owned by a pipeline)
        store: Telemetry store to record into; defaults to the process-wide one

    Returns:
        ReadabilityReport. Empty text yields an empty report without
        recording telemetry.
    """
    if not text or not text.strip():
        return ReadabilityReport()

    probe = probe or start_probe()
    if not probe.started:
        probe.start()
    store = store or get_telemetry_store()
    selected = resolve_algorithms(algorithms)

    stats = compute_text_stats(text)
    probe.checkpoint("text_stats")

    report = ReadabilityReport()
    for name in selected:
        if name == "smog":
            score, estimated = smog_grade(stats)
            if estimated:
                report.estimated.add(name)
        else:
            score = _FORMULAS[name](stats)
        report.scores[name] = score
        probe.increment_steps()

    report.recommendation = readability_recommendation(report.scores, report.estimated)
    report.target_audience = target_audience(report.scores)
    report.improvement_suggestions = improvement_suggestions(stats)

    report.quality = QualityRecord(
        accuracy=0.85 + len(selected) * 0.02,
        confidence=0.90,
        coverage=len(report.scores) / len(READABILITY_ALGORITHMS),
    )
    report.cost = probe.finalize()

    params = CallParameters(
        text_length=len(text),
        word_count=stats.words,
        algorithms=selected,
    )
    store.record(FUNCTION_NAME, params, report.cost, report.quality)
    return report


def readability_recommendation(scores: dict[str, float], estimated: set[str] | None = None) -> str:
    estimated = estimated or set()
    grades = [
        scores[name] for name in GRADE_LEVEL_ALGORITHMS
        if name in scores and name not in estimated
    ]

    if not grades:
        flesch = scores.get("flesch")
        if flesch is None:
            return "Unable to determine readability level."
        if flesch >= 90:
            return "Very easy to read. Suitable for elementary school students."
        if flesch >= 80:
            return "Easy to read. Suitable for 6th grade level."
        if flesch >= 70:
            return "Fairly easy to read. Suitable for 7th grade level."
        if flesch >= 60:
            return "Standard readability. Suitable for 8th-9th grade."
        if flesch >= 50:
            return "Fairly difficult. Suitable for high school students."
        if flesch >= 30:
            return "Difficult to read. Suitable for college students."
        if flesch > 0:
            return "Very difficult. Suitable for college graduates."
        return "Extremely difficult. Suitable for specialized academic audiences."

    grade = sum(grades) / len(grades)
    if grade < 6:
        return f"Very easy to read. Suitable for elementary school level (grade {grade:.0f})."
    if grade < 9:
        return f"Easy to read. Suitable for middle school level (grade {grade:.0f})."
    if grade < 13:
        return f"Standard readability. Suitable for high school level (grade {grade:.0f})."
    if grade < 16:
        return f"Difficult to read. Suitable for college level (grade {grade:.0f})."
    return f"Very difficult. Suitable for graduate level (grade {grade:.0f})."


def target_audience(scores: dict[str, float]) -> list[str]:
    grades = [scores[name] for name in ("flesch-kincaid", "gunning-fog", "coleman-liau") if name in scores]
    if not grades:
        return ["general"]

    low, high = min(grades), max(grades)
    audiences = []
    if low < 6:
        audiences.append("elementary-school")
    if low <= 8 and high >= 6:
        audiences.append("middle-school")
    if low <= 12 and high >= 9:
        audiences.append("high-school")
    if low <= 16 and high >= 13:
        audiences.append("college")
    if high > 16:
        audiences.extend(["graduate", "professional"])
    if high - low < 4 and low >= 7 and high <= 12:
        audiences.append("general-public")
    return audiences


def improvement_suggestions(stats: TextStats) -> list[str]:
    words_per_sentence = stats.avg_words_per_sentence
    syllables_per_word = stats.avg_syllables_per_word
    complex_ratio = stats.complex_word_ratio
    suggestions = []

    if words_per_sentence > 25:
        suggestions.append("Sentences are very long. Break them into shorter, clearer statements.")
    elif words_per_sentence > 20:
        suggestions.append("Reduce sentence length. Aim for 15-20 words per sentence.")

    if syllables_per_word > 2.0:
        suggestions.append("Use simpler vocabulary. Many words have 3+ syllables.")

    if complex_ratio > 0.2:
        suggestions.append("Reduce complex words. Over 20% of words are complex (3+ syllables).")
    elif complex_ratio > 0.15:
        suggestions.append("Consider using simpler alternatives for some complex words.")

    if words_per_sentence > 20 and syllables_per_word > 1.7:
        suggestions.append("Both sentence length and word complexity are high. Simplify for better readability.")

    if not suggestions:
        if words_per_sentence < 15 and syllables_per_word < 1.5:
            suggestions.append("Excellent readability! Text is clear and easy to understand.")
        else:
            suggestions.append("Good readability. Minor improvements possible in sentence variety.")

    return suggestions
