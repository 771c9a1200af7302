"""Metric trends across executions."""

from __future__ import annotations

from simple_evals.reporting.formatting import format_table, metric_cell, metric_names, truncate
from simple_evals.reporting.models import ScenarioRunRecord


def score_trend_report(
    records: list[ScenarioRunRecord],
    scenario: str | None = None,
    metric: str | None = None,
    last_n: int = 20,
    fmt: str = "terminal",
) -> str:
    """Show chronological metric values for one or all scenarios.

    Args:
        records: All stored records.
        scenario: Filter to a specific scenario (None = all).
        metric: Show only this metric (None = all).
        last_n: Show only the last N records.
        fmt: 'terminal' or 'markdown'.
    """
    if not records:
        return "No stored results found."

    filtered = [r for r in records if scenario is None or r.scenario_name == scenario]
    if not filtered:
        return f"No records found for scenario={scenario}"

    filtered = sorted(filtered, key=lambda r: r.timestamp)[-last_n:]
    names = metric_names(filtered)
    if metric is not None:
        if metric not in names:
            return f"No values found for metric={metric}"
        names = [metric]

    headers = ["Execution", "Commit", "Scenario", *[truncate(n, 18) for n in names], "Pass"]
    alignments = ["l", "l", "l", *["r"] * len(names), "c"]

    rows = []
    for r in filtered:
        by_name = {m.name: m for m in r.metrics}
        rows.append([
            r.execution_name,
            r.git.commit,
            truncate(r.scenario_name, 30),
            *[metric_cell(by_name.get(n)) for n in names],
            "Y" if r.passed else "N",
        ])

    footer = ""
    if len(filtered) >= 2:
        parts = []
        for name in names:
            values = [
                m.value for r in filtered for m in r.metrics
                if m.name == name and m.value is not None
            ]
            if values:
                avg = sum(values) / len(values)
                delta = values[-1] - values[0]
                sign = "+" if delta >= 0 else ""
                parts.append(f"{name}: avg={avg:.2f} trend={sign}{delta:.2f}")
        footer = " | ".join(parts)

    title = "Metric Trend"
    if scenario:
        title += f" - {scenario}"

    table = format_table(headers, rows, alignments, fmt=fmt)
    output = f"## {title}\n\n{table}" if fmt == "markdown" else f"{title}\n\n{table}"
    if footer:
        output += f"\n\n{footer}"
    return output
