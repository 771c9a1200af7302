"""Data models for stored scenario runs.

Dataclasses matching the JSON schema each stored scenario run is written in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class DiagnosticRecord:
    """A diagnostic attached to a stored metric."""

    severity: str
    message: str


@dataclass
class MetricRecord:
    """A single metric from an evaluation."""

    name: str
    value: float | None
    rating: str
    failed: bool
    reason: str
    interpretation_reason: str = ""
    diagnostics: list[DiagnosticRecord] = field(default_factory=list)


@dataclass
class GitRecord:
    """Git metadata for the execution."""

    commit: str
    branch: str


@dataclass
class EnvironmentRecord:
    """Models used for the run."""

    llm_provider: str
    llm_model: str
    eval_provider: str
    eval_model: str


@dataclass
class ScenarioRunRecord:
    """One evaluated scenario, keyed by (execution, scenario, iteration)."""

    execution_name: str
    scenario_name: str
    iteration_name: str
    timestamp: str
    git: GitRecord
    environment: EnvironmentRecord
    tags: list[str] = field(default_factory=list)
    messages: list[dict[str, str]] = field(default_factory=list)
    response: dict[str, Any] = field(default_factory=dict)
    metrics: list[MetricRecord] = field(default_factory=list)
    passed: bool = False
    duration_seconds: float = 0.0
