"""Reader for stored scenario run records."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from simple_evals.reporting.models import (
    DiagnosticRecord,
    EnvironmentRecord,
    GitRecord,
    MetricRecord,
    ScenarioRunRecord,
)
from simple_evals.reporting.recorder import RESULTS_DIRNAME, safe_path_component

logger = logging.getLogger(__name__)


def _parse_record(data: dict) -> ScenarioRunRecord:
    return ScenarioRunRecord(
        execution_name=data["execution_name"],
        scenario_name=data["scenario_name"],
        iteration_name=data.get("iteration_name", "1"),
        timestamp=data["timestamp"],
        git=GitRecord(**data["git"]),
        environment=EnvironmentRecord(**data["environment"]),
        tags=data.get("tags", []),
        messages=data.get("messages", []),
        response=data.get("response", {}),
        metrics=[
            MetricRecord(
                **{k: v for k, v in m.items() if k != "diagnostics"},
                diagnostics=[DiagnosticRecord(**d) for d in m.get("diagnostics", [])],
            )
            for m in data.get("metrics", [])
        ],
        passed=data.get("passed", False),
        duration_seconds=data.get("duration_seconds", 0.0),
    )


def load_records(
    storage_root: str | Path, execution_name: str | None = None
) -> list[ScenarioRunRecord]:
    """Load stored records, oldest first.

    Returns an empty list if nothing has been stored. Malformed files are
    skipped with a warning.
    """
    results_dir = Path(storage_root) / RESULTS_DIRNAME
    if execution_name is not None:
        results_dir = results_dir / safe_path_component(execution_name)
        pattern = "*/*.json"
    else:
        pattern = "*/*/*.json"

    if not results_dir.exists():
        logger.debug(f"No stored results found at {results_dir}")
        return []

    records: list[ScenarioRunRecord] = []
    for path in sorted(results_dir.glob(pattern)):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            records.append(_parse_record(data))
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Skipping malformed record {path}: {e}")

    records.sort(key=lambda r: r.timestamp)
    return records
