"""
Adaptive Analysis Pipeline

Runs the full feedback loop for one text:

    profile -> select strategy -> run collaborator under a probe
            -> record telemetry -> score -> record outcome

The analyzer owns neither the selector nor the store; both are injected so
several analyzers can share one TelemetryStore while each keeps its own
(single-owner) StrategySelector.

Usage:
    analyzer = AdaptiveAnalyzer()
    result = analyzer.analyze(text, RequirementSpec(min_quality=0.8))
    print(result.strategy.name, result.report.recommendation)
"""

from dataclasses import dataclass

from textlab.analysis.characteristics import profile_text
from textlab.analysis.readability import ReadabilityReport, calculate_readability
from textlab.logging_config import Timer, debug_log
from textlab.strategy import (
    OptimizationScore,
    RequirementSpec,
    Strategy,
    StrategySelector,
    SynchronizedStrategySelector,
    TextCharacteristics,
    score_outcome,
)
from textlab.telemetry import CostProbe, TelemetryStore, get_telemetry_store

# Success threshold when the caller sets no quality floor
DEFAULT_SUCCESS_THRESHOLD = 0.5


@dataclass
class AnalysisResult:
    """Everything produced by one AdaptiveAnalyzer.analyze() call."""
    characteristics: TextCharacteristics
    strategy: Strategy
    report: ReadabilityReport
    score: OptimizationScore
    success: bool


class AdaptiveAnalyzer:
    """
    Readability analysis whose depth adapts to the input and to history.

    Args:
        selector: StrategySelector (or synchronized wrapper) to consult and train
        store: TelemetryStore to record calls into; defaults to the process-wide one
        learn: If False, outcomes are not fed back to the selector
    """

    def __init__(
        self,
        selector: StrategySelector | SynchronizedStrategySelector | None = None,
        store: TelemetryStore | None = None,
        learn: bool = True,
    ):
        self.selector = selector or StrategySelector()
        self.store = store or get_telemetry_store()
        self.learn = learn

    def analyze(
        self,
        text: str,
        requirements: RequirementSpec | None = None,
        language: str = "en",
        domain: str | None = None,
    ) -> AnalysisResult:
        """
        Analyze one text with an adaptively selected strategy.

        Raises:
            InvalidStrategyError: Propagated from the selector
        """
        requirements = requirements or RequirementSpec()
        characteristics = profile_text(text, language=language, domain=domain)

        with Timer("analyze", auto_log=False) as timer:
            strategy = self.selector.select_strategy(characteristics, requirements)

            probe = CostProbe().start()
            report = calculate_readability(
                text,
                algorithms=strategy.parameters.algorithms,
                probe=probe,
                store=self.store,
            )

            score = score_outcome(strategy, report.cost, report.quality, requirements)
            threshold = requirements.min_quality or DEFAULT_SUCCESS_THRESHOLD
            success = bool(report.scores) and score.weighted_total >= threshold

            if self.learn:
                self.selector.record_outcome(characteristics, strategy, score, success)

        debug_log(
            f"[PIPELINE] {strategy.name} -> score={score.weighted_total:.3f} "
            f"success={success} in {timer.get_duration_ms():.1f} ms"
        )
        return AnalysisResult(
            characteristics=characteristics,
            strategy=strategy,
            report=report,
            score=score,
            success=success,
        )
