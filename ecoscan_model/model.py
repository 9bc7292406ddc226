"""
Lifecycle Carbon & Cost Estimation Model

This module maps a WorkloadConfig to its lifecycle footprint across three
phases:
- Training: a one-time batch cost
- Inference: a steady-state annual cost, multiplied by the project lifetime
- Embodied: accelerator manufacturing carbon, amortized linearly over a
  fixed 4-year hardware refresh cycle

Assumptions:
- Inference energy is annualized from a single month of request volume and
  held constant for every year of the project. Growing traffic is undercounted.
- Embodied carbon uses the 4-year reference lifespan regardless of the actual
  project length, so very short or very long projects are approximate.
"""

from dataclasses import dataclass
from typing import Dict

from .config import WorkloadConfig
from .reference import (
    ENERGY_COST_PER_KWH,
    HARDWARE_LIFESPAN_YEARS,
    get_hardware,
    get_inference_region,
    get_training_region,
)


# Grade thresholds on total kg CO2e, checked in order (exclusive lower bound)
GRADE_THRESHOLDS = (
    (10000.0, 'E'),
    (5000.0, 'D'),
    (2000.0, 'C'),
    (500.0, 'B'),
)
GRADES = ('A', 'B', 'C', 'D', 'E')


def grade_for(total_co2_kg: float) -> str:
    """Letter grade for a lifecycle total: A (best) to E (worst)."""
    for threshold, grade in GRADE_THRESHOLDS:
        if total_co2_kg > threshold:
            return grade
    return 'A'


@dataclass(frozen=True)
class LifecycleMetrics:
    """Derived lifecycle footprint of one WorkloadConfig."""
    training_energy_kwh: float
    training_co2_kg: float

    # Annual figures
    inference_energy_kwh: float
    inference_co2_kg: float

    embodied_co2_kg: float
    total_co2_kg: float
    total_cost_euro: float
    grade: str

    def to_dict(self) -> dict:
        """Convert to the JSON shape used in reports and history records."""
        return {
            "training": {
                "energy": self.training_energy_kwh,
                "co2": self.training_co2_kg,
            },
            "inference": {
                "energy": self.inference_energy_kwh,
                "co2": self.inference_co2_kg,
            },
            "embodied": {"co2": self.embodied_co2_kg},
            "totalCo2": self.total_co2_kg,
            "totalCost": self.total_cost_euro,
            "grade": self.grade,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LifecycleMetrics":
        return cls(
            training_energy_kwh=data["training"]["energy"],
            training_co2_kg=data["training"]["co2"],
            inference_energy_kwh=data["inference"]["energy"],
            inference_co2_kg=data["inference"]["co2"],
            embodied_co2_kg=data["embodied"]["co2"],
            total_co2_kg=data["totalCo2"],
            total_cost_euro=data["totalCost"],
            grade=data["grade"],
        )


def estimate(config: WorkloadConfig) -> LifecycleMetrics:
    """
    Estimate lifecycle energy, carbon, cost and grade for a config.

    Pure and deterministic. References are expected to be resolved already
    (see sanitize_config); any that are not still resolve to the defaults.
    """
    hw = get_hardware(config.hardware_model)
    training_region = get_training_region(config.training_region)
    inference_region = get_inference_region(config.inference_region)
    years = config.project_lifetime_years

    training_energy = config.gpu_count * hw.power_watts * config.training_hours / 1000
    training_co2 = training_energy * training_region.carbon_intensity

    # One month of request-seconds at board power, scaled to a year
    inference_energy = (config.monthly_requests * config.avg_latency_seconds *
                        hw.power_watts / 3600 / 1000) * 12
    inference_co2 = inference_energy * inference_region.carbon_intensity

    embodied_co2 = config.gpu_count * hw.embodied_carbon_kg * (years / HARDWARE_LIFESPAN_YEARS)

    total_co2 = training_co2 + (inference_co2 * years) + embodied_co2
    total_cost = (training_energy + (inference_energy * years)) * ENERGY_COST_PER_KWH

    return LifecycleMetrics(
        training_energy_kwh=training_energy,
        training_co2_kg=training_co2,
        inference_energy_kwh=inference_energy,
        inference_co2_kg=inference_co2,
        embodied_co2_kg=embodied_co2,
        total_co2_kg=total_co2,
        total_cost_euro=total_cost,
        grade=grade_for(total_co2),
    )


def lifetime_inference_co2_kg(metrics: LifecycleMetrics, config: WorkloadConfig) -> float:
    """Inference carbon over the whole project lifetime."""
    return metrics.inference_co2_kg * config.project_lifetime_years


def compare_metrics(baseline: LifecycleMetrics, current: LifecycleMetrics) -> Dict[str, float]:
    """
    Compare current metrics against a baseline.

    Reduction percentages are positive when current is better and 0.0 when
    the baseline quantity is zero.
    """
    def _reduction_pct(base: float, cur: float) -> float:
        if base > 0:
            return (base - cur) / base * 100
        return 0.0

    return {
        'co2_delta_kg': current.total_co2_kg - baseline.total_co2_kg,
        'cost_delta_euro': current.total_cost_euro - baseline.total_cost_euro,
        'co2_reduction_pct': _reduction_pct(baseline.total_co2_kg, current.total_co2_kg),
        'cost_reduction_pct': _reduction_pct(baseline.total_cost_euro, current.total_cost_euro),
        'training_co2_delta_kg': current.training_co2_kg - baseline.training_co2_kg,
        'inference_co2_delta_kg': current.inference_co2_kg - baseline.inference_co2_kg,
        'embodied_co2_delta_kg': current.embodied_co2_kg - baseline.embodied_co2_kg,
    }
