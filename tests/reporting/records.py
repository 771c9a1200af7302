"""Builders for stored scenario run records used by the reporting tests."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from simple_evals.reporting.models import (
    DiagnosticRecord,
    EnvironmentRecord,
    GitRecord,
    MetricRecord,
    ScenarioRunRecord,
)


def make_record(
    execution: str = "20250101T120000",
    scenario: str = "tests.TestAstronomy.test_venus",
    coherence: float | None = 4.6,
    relevance: float | None = 4.2,
    timestamp: str = "2025-01-01T12:00:00+00:00",
    commit: str = "abc1234",
) -> ScenarioRunRecord:
    metrics = []
    for name, value in (("Coherence", coherence), ("Relevance", relevance)):
        if value is None:
            metrics.append(
                MetricRecord(
                    name=name,
                    value=None,
                    rating="Unacceptable",
                    failed=True,
                    reason="",
                    interpretation_reason=f"{name} could not be evaluated: judge unreachable",
                    diagnostics=[DiagnosticRecord("Error", "judge unreachable")],
                )
            )
            continue
        failed = value < 4.0
        verdict = f"{name} is less than 4." if failed else f"{name} is {value:g}."
        metrics.append(
            MetricRecord(
                name=name,
                value=value,
                rating="Exceptional" if value > 4.0 else "Good" if value > 3.0 else "Average",
                failed=failed,
                reason=f"{name} judged",
                interpretation_reason=verdict,
            )
        )
    return ScenarioRunRecord(
        execution_name=execution,
        scenario_name=scenario,
        iteration_name="1",
        timestamp=timestamp,
        git=GitRecord(commit=commit, branch="main"),
        environment=EnvironmentRecord(
            llm_provider="azure",
            llm_model="gpt-4o",
            eval_provider="azure",
            eval_model="gpt-4o",
        ),
        tags=["simple-test"],
        messages=[{"role": "user", "content": "How far is Venus?"}],
        response={"text": "About 24 million miles."},
        metrics=metrics,
        passed=not any(m.failed for m in metrics),
        duration_seconds=3.25,
    )


def store(root: Path, record: ScenarioRunRecord) -> Path:
    path = (
        root / "results" / record.execution_name / record.scenario_name
        / f"{record.iteration_name}.json"
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(record)))
    return path
