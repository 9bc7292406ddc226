"""
Assessment session: a frozen baseline and a mutable working copy.

One AssessmentSession per logical assessment. Nothing here is global; callers
own the session and pass it to whatever needs it.
"""

from dataclasses import dataclass, fields
from typing import Any, List, Mapping, Union

from .config import DEFAULT_CONFIG, WorkloadConfig, sanitize_config
from .model import LifecycleMetrics, compare_metrics, estimate
from .strategies import (
    StrategyState,
    apply_all,
    evaluate_strategies,
    get_strategy,
)


ConfigInput = Union[WorkloadConfig, Mapping[str, Any]]


@dataclass(frozen=True)
class MetricsPair:
    """Baseline and current metrics computed together."""
    baseline: LifecycleMetrics
    current: LifecycleMetrics

    def comparison(self) -> dict:
        return compare_metrics(self.baseline, self.current)


class AssessmentSession:
    """
    Holds the baseline/current pair for one assessment.

    Example:
        session = AssessmentSession.start(load_config("workload.json"))
        session.toggle("training_region")
        pair = session.get_metrics()
        print(pair.baseline.total_co2_kg, pair.current.total_co2_kg)
    """

    def __init__(self, baseline: WorkloadConfig, current: WorkloadConfig):
        self._baseline = baseline
        self._current = current

    @classmethod
    def start(cls, config: ConfigInput = DEFAULT_CONFIG) -> "AssessmentSession":
        """Begin an assessment; baseline and current start identical."""
        validated = sanitize_config(config)
        return cls(validated, validated)

    @property
    def baseline(self) -> WorkloadConfig:
        return self._baseline

    @property
    def current(self) -> WorkloadConfig:
        return self._current

    def set_current(self, config: ConfigInput) -> WorkloadConfig:
        """Replace the working copy (validated). The baseline never changes."""
        self._current = sanitize_config(config)
        return self._current

    def update_current(self, **changes: Any) -> WorkloadConfig:
        """Edit individual fields of the working copy, then validate."""
        return self.set_current(self._current.replace(**changes))

    def reset(self) -> WorkloadConfig:
        """Discard every change made to the working copy."""
        self._current = self._baseline
        return self._current

    def get_metrics(self) -> MetricsPair:
        """Estimate both configs. Recomputed on every call."""
        return MetricsPair(
            baseline=estimate(self._baseline),
            current=estimate(self._current),
        )

    def strategy_states(self) -> List[StrategyState]:
        return evaluate_strategies(self._current, self._baseline)

    def toggle(self, strategy_id: str) -> WorkloadConfig:
        """Toggle one strategy on the working copy."""
        strategy = get_strategy(strategy_id)
        self._current = strategy.toggle(self._current, self._baseline)
        return self._current

    def apply_all(self) -> WorkloadConfig:
        self._current = apply_all(self._current, self._baseline)
        return self._current

    def changed_fields(self) -> List[str]:
        """Names of the fields where current differs from baseline."""
        return [
            f.name for f in fields(WorkloadConfig)
            if getattr(self._current, f.name) != getattr(self._baseline, f.name)
        ]
