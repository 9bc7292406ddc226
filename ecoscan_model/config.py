"""
Workload configuration loading, validation and serialization.

A WorkloadConfig is the entity the optimizer works on. Anything coming from
outside (a JSON file, an imported candidate, a manual edit) passes through
sanitize_config() first, which never fails: unknown hardware or regions are
replaced by the reference defaults and malformed numbers fall back to the
new-project defaults.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import json
import logging
import math
from pathlib import Path

try:
    import json5
    _HAS_JSON5 = True
except ImportError:
    _HAS_JSON5 = False

from .reference import (
    DEFAULT_HARDWARE,
    DEFAULT_INFERENCE_REGION,
    DEFAULT_TRAINING_REGION,
    find_hardware,
    find_region,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's round() uses banker's rounding (round(2.5) == 2); the workload
    figures are rounded the way a person would (2.5 -> 3).
    """
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class WorkloadConfig:
    """An AI workload as seen by the lifecycle model.

    Frozen: every change produces a new config via replace(), so a session's
    baseline can be shared without copying.
    """
    hardware_model: str = DEFAULT_HARDWARE.model
    gpu_count: int = 8
    training_hours: float = 240.0
    training_region: str = DEFAULT_TRAINING_REGION.name
    inference_region: str = DEFAULT_INFERENCE_REGION.name
    monthly_requests: float = 100000.0
    avg_latency_seconds: float = 2.5
    project_lifetime_years: float = 2.0
    audit_notes: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    def replace(self, **changes: Any) -> "WorkloadConfig":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert to the camelCase JSON shape used for import and export."""
        return {
            "hardwareModel": self.hardware_model,
            "gpuCount": self.gpu_count,
            "trainingHours": self.training_hours,
            "trainingRegion": self.training_region,
            "inferenceRegion": self.inference_region,
            "monthlyRequests": self.monthly_requests,
            "avgLatencySeconds": self.avg_latency_seconds,
            "projectLifetimeYears": self.project_lifetime_years,
            "auditNotes": list(self.audit_notes),
            "recommendations": list(self.recommendations),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkloadConfig":
        """Create a validated config from a mapping (see sanitize_config)."""
        return sanitize_config(data)


DEFAULT_CONFIG = WorkloadConfig()


# Accepted input keys per field, in priority order: camelCase wire name,
# snake_case attribute name, then the names used by the document extractor.
FIELD_KEYS: Dict[str, Tuple[str, ...]] = {
    "hardware_model": ("hardwareModel", "hardware_model", "hardware"),
    "gpu_count": ("gpuCount", "gpu_count", "numGpus"),
    "training_hours": ("trainingHours", "training_hours"),
    "training_region": ("trainingRegion", "training_region"),
    "inference_region": ("inferenceRegion", "inference_region"),
    "monthly_requests": ("monthlyRequests", "monthly_requests", "requestsPerMonth"),
    "avg_latency_seconds": ("avgLatencySeconds", "avg_latency_seconds", "avgLatency"),
    "project_lifetime_years": ("projectLifetimeYears", "project_lifetime_years", "projectYears"),
    "audit_notes": ("auditNotes", "audit_notes", "auditLog"),
    "recommendations": ("recommendations",),
}


def _get_field(data: Mapping[str, Any], name: str) -> Any:
    for key in FIELD_KEYS[name]:
        if data.get(key) is not None:
            return data[key]
    return None


def _as_number(value: Any) -> Optional[float]:
    """Coerce to a finite float, or None if that is not possible."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _as_strings(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value if item is not None)
    return ()


def _check_fields(data: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Compute sanitized field values plus a message per substitution."""
    values: Dict[str, Any] = {}
    issues: List[str] = []
    defaults = DEFAULT_CONFIG

    hardware = _get_field(data, "hardware_model")
    if find_hardware(hardware) is None:
        issues.append(f"Unknown hardware {hardware!r}, using {DEFAULT_HARDWARE.model!r}")
        values["hardware_model"] = DEFAULT_HARDWARE.model
    else:
        values["hardware_model"] = hardware

    for name, fallback in (("training_region", DEFAULT_TRAINING_REGION),
                           ("inference_region", DEFAULT_INFERENCE_REGION)):
        region = _get_field(data, name)
        if find_region(region) is None:
            issues.append(f"Unknown {name} {region!r}, using {fallback.name!r}")
            values[name] = fallback.name
        else:
            values[name] = region

    gpus = _as_number(_get_field(data, "gpu_count"))
    if gpus is None:
        issues.append(f"gpu_count missing or not numeric, using {defaults.gpu_count}")
        values["gpu_count"] = defaults.gpu_count
    else:
        count = round_half_up(gpus)
        if count < 1 or count != gpus:
            issues.append(f"gpu_count must be an integer >= 1, got {gpus:g}")
        values["gpu_count"] = max(1, count)

    for name in ("training_hours", "monthly_requests", "avg_latency_seconds"):
        number = _as_number(_get_field(data, name))
        if number is None:
            issues.append(f"{name} missing or not numeric, using {getattr(defaults, name):g}")
            values[name] = getattr(defaults, name)
        elif number < 0:
            issues.append(f"{name} must be non-negative, got {number:g}")
            values[name] = 0.0
        else:
            values[name] = number

    years = _as_number(_get_field(data, "project_lifetime_years"))
    if years is None or years <= 0:
        issues.append(f"project_lifetime_years must be positive, "
                      f"using {defaults.project_lifetime_years:g}")
        values["project_lifetime_years"] = defaults.project_lifetime_years
    else:
        values["project_lifetime_years"] = years

    values["audit_notes"] = _as_strings(_get_field(data, "audit_notes"))
    values["recommendations"] = _as_strings(_get_field(data, "recommendations"))

    return values, issues


def sanitize_config(data: Union[WorkloadConfig, Mapping[str, Any]]) -> WorkloadConfig:
    """
    Turn any config-shaped input into a valid WorkloadConfig.

    Never raises. Unknown hardware/region names are replaced by the reference
    defaults; missing or malformed numbers by the new-project defaults;
    gpu_count is rounded and floored at 1; negative quantities clamp to 0.

    Args:
        data: A WorkloadConfig or a mapping with camelCase/snake_case keys

    Returns:
        WorkloadConfig whose references all resolve
    """
    if isinstance(data, WorkloadConfig):
        data = data.to_dict()
    if not isinstance(data, Mapping):
        logger.debug("Config input of type %s is not a mapping, using defaults",
                     type(data).__name__)
        data = {}
    values, issues = _check_fields(data)
    for issue in issues:
        logger.debug("Config substitution: %s", issue)
    return WorkloadConfig(**values)


def find_config_issues(data: Union[WorkloadConfig, Mapping[str, Any]]) -> List[str]:
    """
    Describe what sanitize_config() would substitute in `data`.

    Returns empty list if the input is already valid.
    """
    if isinstance(data, WorkloadConfig):
        data = data.to_dict()
    if not isinstance(data, Mapping):
        return ["Config must be a JSON object"]
    _, issues = _check_fields(data)
    return issues


def read_json(path: Union[str, Path]) -> Any:
    """
    Read a JSON document from disk.

    Supports JSON with comments (JSONC) if json5 is installed.
    """
    path = Path(path)
    with open(path, 'r') as f:
        if _HAS_JSON5:
            return json5.load(f)
        return json.load(f)


def load_config(path: Union[str, Path]) -> WorkloadConfig:
    """
    Load a workload configuration from a JSON file.

    Args:
        path: Path to JSON config file

    Returns:
        Sanitized WorkloadConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is not valid JSON
    """
    return sanitize_config(read_json(path))


def save_config(config: WorkloadConfig, path: Union[str, Path]) -> None:
    """Save a workload configuration to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
