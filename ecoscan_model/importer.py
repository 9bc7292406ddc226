"""
Import of candidate configurations produced outside the model.

A document extractor (or any other collaborator) hands over a best-effort
candidate mapping, possibly partial or with unknown names. The candidate goes
through the same sanitizer as every other input. When no usable candidate
exists at all, the assessment continues from FALLBACK_CONFIG, a deliberately
high-carbon profile labeled as such in its audit notes.
"""

from pathlib import Path
from typing import Any, Mapping, Optional, Union
import json
import logging

try:
    import json5
    _HAS_JSON5 = True
except ImportError:
    _HAS_JSON5 = False

from .config import WorkloadConfig, sanitize_config
from .session import AssessmentSession

logger = logging.getLogger(__name__)


class ImportParseFailure(Exception):
    """The collaborator's output could not be turned into a candidate config."""


FALLBACK_CONFIG = WorkloadConfig(
    hardware_model="NVIDIA A100",
    gpu_count=16,
    training_hours=1200.0,
    training_region="USA (Virginia/Coal)",
    inference_region="China (Coal)",
    monthly_requests=650000.0,
    avg_latency_seconds=3.2,
    project_lifetime_years=3.0,
    audit_notes=(
        "Unable to parse file specifics",
        "Defaulting to high-risk profile",
    ),
    recommendations=(
        "Check file format",
        "Manually adjust parameters",
    ),
)


def parse_candidate(text: str) -> dict:
    """
    Parse collaborator output (JSON, or JSONC if json5 is installed).

    Raises:
        ImportParseFailure: If the text is empty, not JSON, or not an object
    """
    if not text or not text.strip():
        raise ImportParseFailure("Candidate document is empty")
    try:
        data = json5.loads(text) if _HAS_JSON5 else json.loads(text)
    except ValueError as e:
        raise ImportParseFailure(f"Candidate is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ImportParseFailure(
            f"Candidate must be a JSON object, got {type(data).__name__}")
    return data


def load_candidate(path: Union[str, Path]) -> dict:
    """
    Read and parse a candidate config file.

    Raises:
        ImportParseFailure: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise ImportParseFailure(f"Cannot read {path}: {e}") from e
    return parse_candidate(text)


def config_from_candidate(candidate: Optional[Mapping[str, Any]]) -> WorkloadConfig:
    """
    Validate a candidate, or fall back when there is none.

    Never raises: a missing candidate yields FALLBACK_CONFIG, and a present
    one is sanitized (unknown names defaulted, bad numbers replaced).
    """
    if candidate is None or not isinstance(candidate, Mapping):
        logger.warning("No usable candidate config, using high-carbon fallback profile")
        return FALLBACK_CONFIG
    return sanitize_config(candidate)


def import_config(path: Union[str, Path]) -> WorkloadConfig:
    """Load a candidate file, falling back to FALLBACK_CONFIG on any parse failure."""
    try:
        candidate = load_candidate(path)
    except ImportParseFailure as e:
        logger.warning("Import failed (%s), using high-carbon fallback profile", e)
        return FALLBACK_CONFIG
    return config_from_candidate(candidate)


def session_from_file(path: Union[str, Path]) -> AssessmentSession:
    """Start an assessment from an imported file."""
    return AssessmentSession.start(import_config(path))
