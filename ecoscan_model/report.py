"""
Reports and assessment history.

Builds the exported report document and the history records saved when an
assessment is finished. History records freeze the metrics they were saved
with; they are never recomputed from their config.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import uuid

from .config import WorkloadConfig, read_json, sanitize_config
from .model import LifecycleMetrics


def _format_timestamp() -> str:
    """Return ISO 8601 timestamp in UTC."""
    return datetime.now(timezone.utc).isoformat()


def savings_euro(baseline: LifecycleMetrics, current: LifecycleMetrics) -> float:
    """Energy cost avoided by the current config (negative if it costs more)."""
    return baseline.total_cost_euro - current.total_cost_euro


def carbon_offset_percent(baseline: LifecycleMetrics, current: LifecycleMetrics) -> float:
    """Percentage of baseline CO2 avoided; 0.0 when the baseline emits nothing."""
    if baseline.total_co2_kg > 0:
        return (baseline.total_co2_kg - current.total_co2_kg) / baseline.total_co2_kg * 100
    return 0.0


@dataclass(frozen=True)
class HistoryRecord:
    """
    Snapshot of a saved assessment.

    Only the name may change after creation (see renamed()).
    """
    id: str
    name: str
    created_date: str  # ISO date, YYYY-MM-DD
    baseline_metrics: LifecycleMetrics
    current_metrics: LifecycleMetrics
    config_at_save: WorkloadConfig

    @property
    def savings_euro(self) -> float:
        return savings_euro(self.baseline_metrics, self.current_metrics)

    @property
    def carbon_offset_percent(self) -> float:
        return carbon_offset_percent(self.baseline_metrics, self.current_metrics)

    @property
    def co2_avoided_kg(self) -> float:
        return self.baseline_metrics.total_co2_kg - self.current_metrics.total_co2_kg

    def renamed(self, name: str) -> "HistoryRecord":
        return replace(self, name=name)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "name": self.name,
            "date": self.created_date,
            "originalScore": self.baseline_metrics.grade,
            "finalScore": self.current_metrics.grade,
            "originalCo2": self.baseline_metrics.total_co2_kg,
            "finalCo2": self.current_metrics.total_co2_kg,
            "savings": self.savings_euro,
            "carbonOffsetPercent": self.carbon_offset_percent,
            "baselineMetrics": self.baseline_metrics.to_dict(),
            "currentMetrics": self.current_metrics.to_dict(),
            "state": self.config_at_save.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryRecord":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            created_date=data.get("date", ""),
            baseline_metrics=LifecycleMetrics.from_dict(data["baselineMetrics"]),
            current_metrics=LifecycleMetrics.from_dict(data["currentMetrics"]),
            config_at_save=sanitize_config(data.get("state", {})),
        )


def _new_record_id() -> str:
    return uuid.uuid4().hex[:8]


def build_history_record(
    config: WorkloadConfig,
    baseline_metrics: LifecycleMetrics,
    current_metrics: LifecycleMetrics,
    name: Optional[str] = None,
    created: Optional[date] = None,
) -> HistoryRecord:
    """
    Freeze an assessment into a HistoryRecord.

    Args:
        config: Current config at save time
        baseline_metrics: Metrics of the session baseline
        current_metrics: Metrics of `config`
        name: Display name (default: Scan_<date>_<id>)
        created: Creation date (default: today)
    """
    created = created or date.today()
    record_id = _new_record_id()
    if name is None:
        name = f"Scan_{created.isoformat()}_{record_id}"
    return HistoryRecord(
        id=record_id,
        name=name,
        created_date=created.isoformat(),
        baseline_metrics=baseline_metrics,
        current_metrics=current_metrics,
        config_at_save=config,
    )


def build_report(
    config: WorkloadConfig,
    metrics: LifecycleMetrics,
    requested_by: str = "",
    generated_at: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the exportable report document.

    Returns:
        {project, metrics, generatedAt, requestedBy}
    """
    return {
        "project": config.to_dict(),
        "metrics": metrics.to_dict(),
        "generatedAt": generated_at or _format_timestamp(),
        "requestedBy": requested_by,
    }


def save_report(report: Dict[str, Any], path: Union[str, Path]) -> None:
    """Write a report document to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(report, f, indent=2)


def generate_report_filename(timestamp: Optional[str] = None) -> str:
    """
    Generate a default report filename.

    Format: EcoScan_Report_{timestamp}.json
    """
    if timestamp is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    else:
        # Clean up ISO timestamp for filename
        timestamp = timestamp.replace(":", "").replace("-", "")[:15]
    return f"EcoScan_Report_{timestamp}.json"


class HistoryStore:
    """
    History records persisted to a JSON file, newest first.

    Example:
        store = HistoryStore("history.json")
        store.add(build_history_record(session.current, pair.baseline, pair.current))
        store.rename(record_id, "Inventory model v2")
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def records(self) -> List[HistoryRecord]:
        """
        All saved records, newest first. A missing file means no history.

        Raises:
            ValueError: If the file is not valid JSON or not a list of records
        """
        if not self.path.exists():
            return []
        data = read_json(self.path)
        if not isinstance(data, list):
            raise ValueError(f"History file {self.path} must hold a JSON list, "
                             f"got {type(data).__name__}")
        records = []
        for i, item in enumerate(data):
            try:
                records.append(HistoryRecord.from_dict(item))
            except (KeyError, TypeError, AttributeError) as e:
                raise ValueError(f"Malformed history record #{i} in {self.path}: {e!r}") from e
        return records

    def _write(self, records: List[HistoryRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump([r.to_dict() for r in records], f, indent=2)

    def add(self, record: HistoryRecord) -> HistoryRecord:
        self._write([record] + self.records())
        return record

    def get(self, record_id: str) -> HistoryRecord:
        for record in self.records():
            if record.id == record_id:
                return record
        raise KeyError(f"Unknown history record: {record_id}")

    def rename(self, record_id: str, name: str) -> HistoryRecord:
        """Change a record's name; every other field stays frozen."""
        records = self.records()
        for i, record in enumerate(records):
            if record.id == record_id:
                records[i] = record.renamed(name)
                self._write(records)
                return records[i]
        raise KeyError(f"Unknown history record: {record_id}")

    def clear(self) -> None:
        """Drop every saved record."""
        self._write([])

    def portfolio_summary(self) -> Dict[str, float]:
        """Totals across all saved assessments."""
        records = self.records()
        return {
            "total_projects": len(records),
            "total_co2_avoided_kg": sum(r.co2_avoided_kg for r in records),
            "total_savings_euro": sum(r.savings_euro for r in records),
        }
