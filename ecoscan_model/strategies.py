"""
Optimization strategies for a workload assessment.

Each strategy is a stateless descriptor targeting one WorkloadConfig field.
Its status is derived on demand from an explicit (current, baseline) pair:

- BASELINE_OPTIMAL: the baseline already satisfies the strategy; toggling is a no-op
- APPLIED: current satisfies it but differs from the baseline; toggling reverts
- AVAILABLE: current does not satisfy it; toggling applies it

Discrete strategies (regions, hardware) are satisfied by an exact match on the
target. Scaled strategies are satisfied at their applied value or below a threshold
that is slightly looser than it (x0.51 vs x0.5, x0.71 vs x0.7, x0.76 vs
x0.75), so a rounded or re-entered value still counts as optimized. Applied
values never exceed the baseline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import WorkloadConfig, round_half_up
from .model import LifecycleMetrics, estimate
from .reference import lowest_carbon_region, most_efficient_hardware


class StrategyStatus(Enum):
    """Derived toggle state of a strategy. Never stored."""
    BASELINE_OPTIMAL = "baseline_optimal"
    APPLIED = "applied"
    AVAILABLE = "available"


class StrategyKind(Enum):
    DISCRETE = "discrete"  # Optimized iff current == target
    SCALED = "scaled"      # Optimized iff current <= limit(baseline)


@dataclass(frozen=True)
class OptimizationStrategy:
    """
    Descriptor for one reversible configuration transform.

    `target` maps the baseline field value to the value apply() sets.
    `limit` (scaled strategies only) maps the baseline field value to the
    largest current value still counted as optimized.
    """
    id: str
    title: str
    field: str
    kind: StrategyKind
    target: Callable[[Any], Any]
    limit: Optional[Callable[[Any], Any]] = None
    description: str = ""

    @property
    def fields(self) -> Tuple[str, ...]:
        return (self.field,)

    def value(self, config: WorkloadConfig) -> Any:
        return getattr(config, self.field)

    def target_value(self, baseline: WorkloadConfig) -> Any:
        return self.target(self.value(baseline))

    def is_optimized(self, current: WorkloadConfig, baseline: WorkloadConfig) -> bool:
        cur = self.value(current)
        base = self.value(baseline)
        if self.kind is StrategyKind.DISCRETE:
            return cur == self.target(base)
        return cur <= self.limit(base) or cur == self.target(base)

    def is_at_baseline(self, current: WorkloadConfig, baseline: WorkloadConfig) -> bool:
        return self.value(current) == self.value(baseline)

    def status(self, current: WorkloadConfig, baseline: WorkloadConfig) -> StrategyStatus:
        if not self.is_optimized(current, baseline):
            return StrategyStatus.AVAILABLE
        if self.is_at_baseline(current, baseline):
            return StrategyStatus.BASELINE_OPTIMAL
        return StrategyStatus.APPLIED

    def apply(self, current: WorkloadConfig, baseline: WorkloadConfig) -> WorkloadConfig:
        """Set this strategy's field to its optimized value."""
        return current.replace(**{self.field: self.target_value(baseline)})

    def revert(self, current: WorkloadConfig, baseline: WorkloadConfig) -> WorkloadConfig:
        """Restore this strategy's field to the baseline value."""
        return current.replace(**{self.field: self.value(baseline)})

    def toggle(self, current: WorkloadConfig, baseline: WorkloadConfig) -> WorkloadConfig:
        """Revert if applied, apply if available, leave unchanged otherwise."""
        status = self.status(current, baseline)
        if status is StrategyStatus.APPLIED:
            return self.revert(current, baseline)
        if status is StrategyStatus.AVAILABLE:
            return self.apply(current, baseline)
        return current

    def describe(self, baseline: WorkloadConfig) -> str:
        return self.description.format(
            baseline=self.value(baseline),
            target=self.target_value(baseline),
        )


# --- Target / limit functions ---

def _cleanest_region(_: Any) -> str:
    return lowest_carbon_region().name


def _efficient_hardware(_: Any) -> str:
    return most_efficient_hardware().model


def _quantized_latency(latency: float) -> float:
    return latency * 0.5


def _quantized_limit(latency: float) -> float:
    return latency * 0.51


def _pruned_hours(hours: float) -> float:
    return float(min(hours, round_half_up(hours * 0.7)))


def _pruned_limit(hours: float) -> float:
    return hours * 0.71


def _rightsized_gpus(gpus: int) -> int:
    return max(1, round_half_up(gpus * 0.75))


def _rightsized_limit(gpus: int) -> int:
    return max(1, round_half_up(gpus * 0.76))


STRATEGIES: Tuple[OptimizationStrategy, ...] = (
    OptimizationStrategy(
        id="training_region",
        title="Training Grid Decoupling",
        field="training_region",
        kind=StrategyKind.DISCRETE,
        target=_cleanest_region,
        description="Baseline trains in {baseline}. Migrate training to {target}.",
    ),
    OptimizationStrategy(
        id="hardware",
        title="Hardware Efficiency Scaling",
        field="hardware_model",
        kind=StrategyKind.DISCRETE,
        target=_efficient_hardware,
        description="Switch from {baseline} to {target} to cut wattage and embodied carbon.",
    ),
    OptimizationStrategy(
        id="inference_region",
        title="Inference Edge Decoupling",
        field="inference_region",
        kind=StrategyKind.DISCRETE,
        target=_cleanest_region,
        description="Baseline serves from {baseline}. Relocate inference to {target}.",
    ),
    OptimizationStrategy(
        id="quantization",
        title="INT8 Quantization",
        field="avg_latency_seconds",
        kind=StrategyKind.SCALED,
        target=_quantized_latency,
        limit=_quantized_limit,
        description="Compress model weights to reduce latency from {baseline:g}s to {target:g}s.",
    ),
    OptimizationStrategy(
        id="pruning",
        title="Spectral Pruning",
        field="training_hours",
        kind=StrategyKind.SCALED,
        target=_pruned_hours,
        limit=_pruned_limit,
        description="Reduce training time from {baseline:g}h to {target:g}h.",
    ),
    OptimizationStrategy(
        id="rightsizing",
        title="Cluster Right-Sizing",
        field="gpu_count",
        kind=StrategyKind.SCALED,
        target=_rightsized_gpus,
        limit=_rightsized_limit,
        description="Downscale from {baseline} GPUs to {target} to minimize idle waste.",
    ),
)


def strategy_ids() -> List[str]:
    return [s.id for s in STRATEGIES]


def get_strategy(strategy_id: str) -> OptimizationStrategy:
    """Get a strategy by id."""
    for strategy in STRATEGIES:
        if strategy.id == strategy_id:
            return strategy
    raise KeyError(f"Unknown strategy: {strategy_id}. Available: {strategy_ids()}")


@dataclass(frozen=True)
class StrategyState:
    """Snapshot of one strategy evaluated against a (current, baseline) pair."""
    strategy_id: str
    title: str
    status: StrategyStatus
    current_value: Any
    baseline_value: Any
    target_value: Any
    description: str

    @property
    def is_optimized(self) -> bool:
        return self.status is not StrategyStatus.AVAILABLE

    @property
    def is_at_baseline(self) -> bool:
        return self.current_value == self.baseline_value

    @property
    def can_toggle(self) -> bool:
        return self.status is not StrategyStatus.BASELINE_OPTIMAL


def evaluate_strategies(
    current: WorkloadConfig,
    baseline: WorkloadConfig,
) -> List[StrategyState]:
    """Derive every strategy's state, in catalogue order."""
    return [
        StrategyState(
            strategy_id=s.id,
            title=s.title,
            status=s.status(current, baseline),
            current_value=s.value(current),
            baseline_value=s.value(baseline),
            target_value=s.target_value(baseline),
            description=s.describe(baseline),
        )
        for s in STRATEGIES
    ]


def toggle_strategy(
    strategy_id: str,
    current: WorkloadConfig,
    baseline: WorkloadConfig,
) -> WorkloadConfig:
    """Toggle the strategy named `strategy_id` and return the new current config."""
    return get_strategy(strategy_id).toggle(current, baseline)


def apply_all(current: WorkloadConfig, baseline: WorkloadConfig) -> WorkloadConfig:
    """Apply every strategy that is currently AVAILABLE."""
    for strategy in STRATEGIES:
        if strategy.status(current, baseline) is StrategyStatus.AVAILABLE:
            current = strategy.apply(current, baseline)
    return current


@dataclass(frozen=True)
class StrategyProjection:
    """Effect of toggling a strategy from the current state."""
    strategy_id: str
    action: Optional[str]  # 'apply', 'revert' or None for a no-op
    co2_delta_kg: float    # toggled - current (negative = reduction)
    cost_delta_euro: float
    projected: LifecycleMetrics


def project_strategy(
    strategy: OptimizationStrategy,
    current: WorkloadConfig,
    baseline: WorkloadConfig,
) -> StrategyProjection:
    """Estimate what toggling `strategy` would do to the current metrics."""
    status = strategy.status(current, baseline)
    action = {
        StrategyStatus.APPLIED: 'revert',
        StrategyStatus.AVAILABLE: 'apply',
    }.get(status)

    before = estimate(current)
    after = estimate(strategy.toggle(current, baseline))
    return StrategyProjection(
        strategy_id=strategy.id,
        action=action,
        co2_delta_kg=after.total_co2_kg - before.total_co2_kg,
        cost_delta_euro=after.total_cost_euro - before.total_cost_euro,
        projected=after,
    )


def project_all(
    current: WorkloadConfig,
    baseline: WorkloadConfig,
) -> Dict[str, StrategyProjection]:
    """Projections for every strategy, keyed by id in catalogue order."""
    return {s.id: project_strategy(s, current, baseline) for s in STRATEGIES}
