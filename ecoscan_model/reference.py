"""
Reference tables for the lifecycle model.

Static hardware and grid profiles plus the energy price. These are loaded
once at import time and never mutated; lookups fall back to fixed defaults
so that an unknown name can never stall an estimate.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class HardwareProfile:
    """Accelerator power draw and manufacturing footprint (per unit)."""
    model: str
    power_watts: float         # Board power in W
    embodied_carbon_kg: float  # kg CO2e per unit


@dataclass(frozen=True)
class RegionProfile:
    """Grid carbon intensity for a deployment region."""
    name: str
    carbon_intensity: float  # kg CO2 per kWh


HARDWARE_OPTIONS: Tuple[HardwareProfile, ...] = (
    HardwareProfile("NVIDIA A100", power_watts=400.0, embodied_carbon_kg=1500.0),
    HardwareProfile("NVIDIA V100", power_watts=300.0, embodied_carbon_kg=1200.0),
    HardwareProfile("NVIDIA T4", power_watts=70.0, embodied_carbon_kg=300.0),
)

REGION_OPTIONS: Tuple[RegionProfile, ...] = (
    RegionProfile("France (Nuclear)", carbon_intensity=0.057),
    RegionProfile("USA (Virginia/Coal)", carbon_intensity=0.380),
    RegionProfile("China (Coal)", carbon_intensity=0.550),
    RegionProfile("Global Avg", carbon_intensity=0.475),
)

ENERGY_COST_PER_KWH = 0.15  # EUR

# Reference hardware refresh cycle used to amortize embodied carbon
HARDWARE_LIFESPAN_YEARS = 4.0

DEFAULT_HARDWARE = HARDWARE_OPTIONS[0]
# Training defaults to a moderate grid, inference to a high-carbon one
DEFAULT_TRAINING_REGION = REGION_OPTIONS[1]
DEFAULT_INFERENCE_REGION = REGION_OPTIONS[3]


def find_hardware(model: Optional[str]) -> Optional[HardwareProfile]:
    """Return the hardware profile named `model`, or None if unknown."""
    for hw in HARDWARE_OPTIONS:
        if hw.model == model:
            return hw
    return None


def find_region(name: Optional[str]) -> Optional[RegionProfile]:
    """Return the region profile named `name`, or None if unknown."""
    for region in REGION_OPTIONS:
        if region.name == name:
            return region
    return None


def get_hardware(model: Optional[str]) -> HardwareProfile:
    """Resolve a hardware model, falling back to DEFAULT_HARDWARE."""
    return find_hardware(model) or DEFAULT_HARDWARE


def get_training_region(name: Optional[str]) -> RegionProfile:
    """Resolve a training region, falling back to DEFAULT_TRAINING_REGION."""
    return find_region(name) or DEFAULT_TRAINING_REGION


def get_inference_region(name: Optional[str]) -> RegionProfile:
    """Resolve an inference region, falling back to DEFAULT_INFERENCE_REGION."""
    return find_region(name) or DEFAULT_INFERENCE_REGION


def lowest_carbon_region() -> RegionProfile:
    """Region with the smallest grid carbon intensity (first wins on ties)."""
    return min(REGION_OPTIONS, key=lambda r: r.carbon_intensity)


def most_efficient_hardware() -> HardwareProfile:
    """Hardware with the lowest power draw, then lowest embodied carbon."""
    return min(HARDWARE_OPTIONS, key=lambda h: (h.power_watts, h.embodied_carbon_kg))


def hardware_names() -> Tuple[str, ...]:
    return tuple(hw.model for hw in HARDWARE_OPTIONS)


def region_names() -> Tuple[str, ...]:
    return tuple(r.name for r in REGION_OPTIONS)
