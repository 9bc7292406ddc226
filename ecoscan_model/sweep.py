"""
Parameter sweep utilities for the lifecycle model.

Re-evaluates a baseline/current pair while one numeric workload field is
overridden, to show how sensitive the footprint and the projected savings
are to that field.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import numpy as np

from .config import WorkloadConfig, round_half_up
from .model import estimate
from .report import carbon_offset_percent


SWEEPABLE_PARAMETERS = (
    "gpu_count",
    "training_hours",
    "monthly_requests",
    "avg_latency_seconds",
    "project_lifetime_years",
)


@dataclass
class SweepResult:
    """Result of a parameter sweep; all lists are aligned with param_values."""
    param_name: str
    param_values: List[float]
    baseline_co2_kg: List[float]
    current_co2_kg: List[float]
    baseline_cost_euro: List[float]
    current_cost_euro: List[float]
    baseline_grade: List[str]
    current_grade: List[str]
    carbon_offset_pct: List[float]

    @property
    def co2_avoided_kg(self) -> List[float]:
        return (np.asarray(self.baseline_co2_kg) - np.asarray(self.current_co2_kg)).tolist()

    @property
    def savings_euro(self) -> List[float]:
        return (np.asarray(self.baseline_cost_euro) - np.asarray(self.current_cost_euro)).tolist()


def _check_parameter(param_name: str) -> None:
    if param_name not in SWEEPABLE_PARAMETERS:
        raise ValueError(f"Invalid sweep parameter: {param_name}. "
                         f"Valid: {list(SWEEPABLE_PARAMETERS)}")


def _with_value(config: WorkloadConfig, param_name: str, value: float) -> WorkloadConfig:
    """Override one field, keeping the config inside its valid ranges."""
    if param_name == "gpu_count":
        count = round_half_up(value)
        if count < 1:
            raise ValueError(f"gpu_count must be >= 1, got {value}")
        return config.replace(gpu_count=count)
    if param_name == "project_lifetime_years" and value <= 0:
        raise ValueError(f"project_lifetime_years must be positive, got {value}")
    if value < 0:
        raise ValueError(f"{param_name} must be non-negative, got {value}")
    return config.replace(**{param_name: float(value)})


def linear_values(start: float, stop: float, num: int) -> List[float]:
    """Evenly spaced sweep values, endpoints included."""
    if num < 1:
        raise ValueError(f"Sweep must have at least one value, got num={num}")
    return np.linspace(start, stop, num).tolist()


def sweep_parameter(
    baseline: WorkloadConfig,
    current: WorkloadConfig,
    param_name: str,
    values: Sequence[float],
) -> SweepResult:
    """
    Sweep one field across both configs of an assessment.

    The same value is written into baseline and current, so the result shows
    how the strategies applied to `current` hold up as the field changes.
    """
    _check_parameter(param_name)
    if len(values) == 0:
        raise ValueError("Sweep must have at least one value")

    base_co2, cur_co2 = [], []
    base_cost, cur_cost = [], []
    base_grade, cur_grade = [], []
    offsets = []

    for value in values:
        b = estimate(_with_value(baseline, param_name, value))
        c = estimate(_with_value(current, param_name, value))
        base_co2.append(b.total_co2_kg)
        cur_co2.append(c.total_co2_kg)
        base_cost.append(b.total_cost_euro)
        cur_cost.append(c.total_cost_euro)
        base_grade.append(b.grade)
        cur_grade.append(c.grade)
        offsets.append(carbon_offset_percent(b, c))

    return SweepResult(
        param_name=param_name,
        param_values=[float(v) for v in values],
        baseline_co2_kg=base_co2,
        current_co2_kg=cur_co2,
        baseline_cost_euro=base_cost,
        current_cost_euro=cur_cost,
        baseline_grade=base_grade,
        current_grade=cur_grade,
        carbon_offset_pct=offsets,
    )


def find_breakeven_value(
    config: WorkloadConfig,
    param_name: str,
    target_co2_kg: float,
    max_value: float,
    tolerance: float = 0.001,
) -> Optional[float]:
    """
    Find the value of `param_name` at which `config` emits `target_co2_kg`.

    Total CO2 is non-decreasing in every sweepable field, so a binary search
    over [lower bound, max_value] converges. Returns None if the target is
    not reached within that range or is already exceeded at the lower bound.
    """
    _check_parameter(param_name)
    low = 1.0 if param_name == "gpu_count" else 0.0
    if param_name == "project_lifetime_years":
        low = tolerance

    def get_co2(value: float) -> float:
        return estimate(_with_value(config, param_name, value)).total_co2_kg

    if get_co2(low) > target_co2_kg or get_co2(max_value) < target_co2_kg:
        return None

    high = max_value
    while high - low > tolerance:
        mid = (low + high) / 2
        if get_co2(mid) < target_co2_kg:
            low = mid
        else:
            high = mid

    return (low + high) / 2
