"""
Learned strategy preferences.

The PreferenceTable maps a strategy name ("balanced") or a domain composite
key ("domain_technical_comprehensive") to a signed adjustment. Successful
outcomes push the value up by how far their score beat the 0.7 baseline;
failures push it down by a fixed penalty.

By default the values are unbounded and never decay, so a long-running
process can accumulate very large adjustments. A PreferencePolicy can be
supplied (or loaded from config/preference_policy.yaml) to decay the old
value before each update and/or clamp the result.
"""

from dataclasses import dataclass

from textlab.config import (
    DOMAIN_FAILURE_PENALTY,
    DOMAIN_SUCCESS_GAIN,
    PREFERENCE_BASELINE_SCORE,
    STRATEGY_FAILURE_PENALTY,
    STRATEGY_SUCCESS_GAIN,
    load_preference_policy_config,
)
from textlab.logging_config import debug_log


@dataclass(frozen=True)
class PreferencePolicy:
    """
    How preference values evolve.

    Attributes:
        decay: Multiplier applied to the current value before an update (0 < decay <= 1)
        clamp: Absolute bound applied after an update; None means unbounded
    """
    decay: float = 1.0
    clamp: float | None = None

    def __post_init__(self):
        if not 0.0 < self.decay <= 1.0:
            raise ValueError(f"decay must be in (0, 1], got {self.decay}")
        if self.clamp is not None and self.clamp <= 0:
            raise ValueError(f"clamp must be positive, got {self.clamp}")

    @classmethod
    def unbounded(cls) -> "PreferencePolicy":
        return cls()

    @classmethod
    def from_config(cls, path=None) -> "PreferencePolicy":
        """Build a policy from the YAML config, falling back to unbounded."""
        data = load_preference_policy_config(path)
        try:
            decay = data.get("decay")
            clamp = data.get("clamp")
            return cls(
                decay=float(decay) if decay is not None else 1.0,
                clamp=float(clamp) if clamp is not None else None,
            )
        except (TypeError, ValueError) as e:
            debug_log(f"[PREFERENCES] Invalid preference policy {data!r}: {e}. Using unbounded policy.")
            return cls.unbounded()

    def apply(self, current: float, delta: float) -> float:
        value = current * self.decay + delta
        if self.clamp is not None:
            value = max(-self.clamp, min(self.clamp, value))
        return value


def domain_key(domain: str, strategy_name: str) -> str:
    """Composite preference key for a (domain, strategy) pair."""
    return f"domain_{domain}_{strategy_name}"


class PreferenceTable:
    """
    Signed preference values learned from outcomes.

    Not thread-safe; owned by a single StrategySelector.
    """

    def __init__(self, policy: PreferencePolicy | None = None):
        self.policy = policy or PreferencePolicy.unbounded()
        self._values: dict[str, float] = {}

    def get(self, key: str) -> float:
        return self._values.get(key, 0.0)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def as_dict(self) -> dict[str, float]:
        return dict(self._values)

    def adjust(self, key: str, delta: float) -> float:
        """Apply delta to one key under the policy. Returns the new value."""
        value = self.policy.apply(self.get(key), delta)
        self._values[key] = value
        return value

    def update_from_outcome(self, strategy_name: str, domain: str, score: float, success: bool) -> None:
        """
        Reinforce or penalize a strategy after an outcome.

        Success: strategy += (score - 0.7) * 10, domain composite += (score - 0.7) * 5
        Failure: strategy -= 5, domain composite -= 2
        """
        if success:
            strategy_delta = (score - PREFERENCE_BASELINE_SCORE) * STRATEGY_SUCCESS_GAIN
            domain_delta = (score - PREFERENCE_BASELINE_SCORE) * DOMAIN_SUCCESS_GAIN
        else:
            strategy_delta = -STRATEGY_FAILURE_PENALTY
            domain_delta = -DOMAIN_FAILURE_PENALTY

        new_value = self.adjust(strategy_name, strategy_delta)
        self.adjust(domain_key(domain, strategy_name), domain_delta)
        debug_log(f"[PREFERENCES] {strategy_name} -> {new_value:.3f} ({'success' if success else 'failure'})")

    def clear(self) -> None:
        self._values.clear()
