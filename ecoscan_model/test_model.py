"""
Unit tests for the lifecycle estimation model and reference tables.

Run with: pytest ecoscan_model/test_model.py -v
"""

from dataclasses import replace

import pytest
from .config import WorkloadConfig
from .model import (
    GRADES, LifecycleMetrics, compare_metrics, estimate, grade_for,
    lifetime_inference_co2_kg,
)
from .reference import (
    DEFAULT_HARDWARE, DEFAULT_INFERENCE_REGION, DEFAULT_TRAINING_REGION,
    HARDWARE_OPTIONS, REGION_OPTIONS, find_hardware, find_region, get_hardware,
    get_inference_region, get_training_region, lowest_carbon_region,
    most_efficient_hardware,
)


@pytest.fixture
def a100_china():
    """4x A100 trained and served from China for two years."""
    return WorkloadConfig(
        hardware_model="NVIDIA A100",
        gpu_count=4,
        training_hours=100.0,
        training_region="China (Coal)",
        inference_region="China (Coal)",
        monthly_requests=50000.0,
        avg_latency_seconds=1.0,
        project_lifetime_years=2.0,
    )


class TestReferenceTables:
    """Tests for hardware and region lookups."""

    def test_table_sizes(self):
        assert len(HARDWARE_OPTIONS) == 3
        assert len(REGION_OPTIONS) == 4

    def test_find_known_hardware(self):
        hw = find_hardware("NVIDIA V100")
        assert hw.power_watts == 300.0
        assert hw.embodied_carbon_kg == 1200.0

    def test_find_unknown_returns_none(self):
        assert find_hardware("NVIDIA H100") is None
        assert find_region("Mars") is None

    def test_get_falls_back_to_defaults(self):
        """Unknown names resolve to the fixed defaults."""
        assert get_hardware("TPU v5") == HARDWARE_OPTIONS[0]
        assert get_training_region("Atlantis") == DEFAULT_TRAINING_REGION
        assert get_inference_region(None) == DEFAULT_INFERENCE_REGION

    def test_default_regions_differ(self):
        """Training defaults to a moderate grid, inference to a dirtier one."""
        assert DEFAULT_TRAINING_REGION.name == "USA (Virginia/Coal)"
        assert DEFAULT_INFERENCE_REGION.name == "Global Avg"
        assert DEFAULT_INFERENCE_REGION.carbon_intensity > DEFAULT_TRAINING_REGION.carbon_intensity

    def test_default_hardware_is_first_option(self):
        assert DEFAULT_HARDWARE.model == "NVIDIA A100"

    def test_lowest_carbon_region(self):
        assert lowest_carbon_region().name == "France (Nuclear)"

    def test_most_efficient_hardware(self):
        assert most_efficient_hardware().model == "NVIDIA T4"


class TestGrade:
    """Tests for grade thresholds."""

    @pytest.mark.parametrize("co2, expected", [
        (0.0, 'A'),
        (500.0, 'A'),
        (500.01, 'B'),
        (2000.0, 'B'),
        (2000.5, 'C'),
        (5000.0, 'C'),
        (5001.0, 'D'),
        (10000.0, 'D'),
        (10000.1, 'E'),
    ])
    def test_thresholds_are_exclusive(self, co2, expected):
        assert grade_for(co2) == expected

    def test_grade_monotonic_in_co2(self):
        """More CO2 never gives a better grade."""
        values = [0, 250, 500, 501, 1999, 2001, 4999, 5001, 9999, 10001, 50000]
        grades = [GRADES.index(grade_for(v)) for v in values]
        assert grades == sorted(grades)


class TestEstimate:
    """Tests for the estimation formulas."""

    def test_training_phase(self, a100_china):
        m = estimate(a100_china)
        assert m.training_energy_kwh == pytest.approx(160.0)
        assert m.training_co2_kg == pytest.approx(88.0)

    def test_inference_phase_is_annual(self, a100_china):
        m = estimate(a100_china)
        assert m.inference_energy_kwh == pytest.approx(66.6667, rel=1e-5)
        assert m.inference_co2_kg == pytest.approx(36.6667, rel=1e-5)
        assert lifetime_inference_co2_kg(m, a100_china) == pytest.approx(73.3333, rel=1e-5)

    def test_embodied_amortized_over_four_years(self, a100_china):
        m = estimate(a100_china)
        # 4 GPUs * 1500 kg * (2 / 4)
        assert m.embodied_co2_kg == pytest.approx(3000.0)

    def test_total_and_grade(self, a100_china):
        m = estimate(a100_china)
        assert m.total_co2_kg == pytest.approx(3161.333, rel=1e-6)
        assert m.grade == 'C'

    def test_total_cost(self, a100_china):
        m = estimate(a100_china)
        # (160 + 66.667 * 2) kWh * 0.15 EUR
        assert m.total_cost_euro == pytest.approx(44.0)

    def test_default_config(self):
        """New-project defaults land in grade D."""
        m = estimate(WorkloadConfig())
        assert m.training_energy_kwh == pytest.approx(768.0)
        assert m.embodied_co2_kg == pytest.approx(6000.0)
        assert m.total_co2_kg == pytest.approx(6608.50667, rel=1e-6)
        assert m.grade == 'D'

    def test_deterministic(self, a100_china):
        assert estimate(a100_china) == estimate(a100_china)

    def test_total_at_least_embodied(self, a100_china):
        for cfg in (a100_china, a100_china.replace(training_hours=0.0, monthly_requests=0.0)):
            m = estimate(cfg)
            assert m.total_co2_kg >= m.embodied_co2_kg

    def test_zero_usage_only_embodied(self, a100_china):
        cfg = a100_china.replace(training_hours=0.0, avg_latency_seconds=0.0)
        m = estimate(cfg)
        assert m.total_co2_kg == m.embodied_co2_kg
        assert m.total_cost_euro == 0.0

    def test_unresolved_reference_uses_default(self, a100_china):
        """Estimation never fails on a dangling name."""
        dangling = a100_china.replace(training_region="Nowhere")
        resolved = a100_china.replace(training_region=DEFAULT_TRAINING_REGION.name)
        assert estimate(dangling) == estimate(resolved)

    def test_cleaner_region_reduces_training_co2(self, a100_china):
        france = a100_china.replace(training_region="France (Nuclear)")
        base, cur = estimate(a100_china), estimate(france)
        assert cur.training_co2_kg < base.training_co2_kg
        assert cur.total_co2_kg < base.total_co2_kg
        assert cur.inference_co2_kg == base.inference_co2_kg


class TestMetricsSerialization:
    """Tests for LifecycleMetrics dict conversion."""

    def test_to_dict_shape(self, a100_china):
        d = estimate(a100_china).to_dict()
        assert set(d) == {"training", "inference", "embodied", "totalCo2", "totalCost", "grade"}
        assert d["training"]["energy"] == pytest.approx(160.0)
        assert d["grade"] == 'C'

    def test_from_dict_restores(self, a100_china):
        m = estimate(a100_china)
        assert LifecycleMetrics.from_dict(m.to_dict()) == m


class TestCompareMetrics:
    """Tests for baseline/current comparison."""

    def test_reduction_positive_when_better(self, a100_china):
        base = estimate(a100_china)
        cur = estimate(a100_china.replace(hardware_model="NVIDIA T4"))
        cmp = compare_metrics(base, cur)
        assert cmp['co2_delta_kg'] < 0
        assert cmp['co2_reduction_pct'] > 0
        assert cmp['cost_reduction_pct'] > 0

    def test_zero_baseline_gives_zero_pct(self, a100_china):
        zero = replace(estimate(a100_china), total_co2_kg=0.0, total_cost_euro=0.0)
        cmp = compare_metrics(zero, estimate(a100_china))
        assert cmp['co2_reduction_pct'] == 0.0
        assert cmp['cost_reduction_pct'] == 0.0
