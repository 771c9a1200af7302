"""Terminal and markdown table formatting for stored results."""

from __future__ import annotations

from simple_evals.reporting.models import MetricRecord, ScenarioRunRecord


def truncate(text: str, width: int) -> str:
    """Truncate text to width, adding an ellipsis if needed."""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def metric_cell(metric: MetricRecord | None) -> str:
    """Compact "value (rating)" cell; ERR when no score was produced."""
    if metric is None:
        return "-"
    if metric.value is None:
        return "ERR"
    return f"{metric.value:.2f} ({metric.rating})"


def metric_names(records: list[ScenarioRunRecord]) -> list[str]:
    """Metric names across records, in first-seen order."""
    names: list[str] = []
    for r in records:
        for m in r.metrics:
            if m.name not in names:
                names.append(m.name)
    return names


def _pad(text: str, width: int, align: str) -> str:
    if align == "r":
        return text.rjust(width)
    if align == "c":
        return text.center(width)
    return text.ljust(width)


def format_table(
    headers: list[str],
    rows: list[list[str]],
    alignments: list[str] | None = None,
    fmt: str = "terminal",
) -> str:
    """Render a fixed-width table.

    Args:
        headers: Column header strings.
        rows: Row cells; short rows are padded with empty cells.
        alignments: Per-column alignment ('l', 'r', 'c'). Defaults to left.
        fmt: 'terminal' for ASCII borders, 'markdown' for a GFM table.
    """
    if not headers:
        return ""

    num_cols = len(headers)
    aligns = alignments or ["l"] * num_cols
    widths = [
        max([len(h), *(len(r[i]) for r in rows if i < len(r))])
        for i, h in enumerate(headers)
    ]

    def line(cells: list[str]) -> str:
        padded = [
            _pad(cells[i] if i < len(cells) else "", widths[i], aligns[i])
            for i in range(num_cols)
        ]
        return "| " + " | ".join(padded) + " |"

    body = [line(r) for r in rows]

    if fmt == "markdown":
        separators = []
        for width, align in zip(widths, aligns):
            if align == "r":
                separators.append("-" * (width - 1) + ":")
            elif align == "c":
                separators.append(":" + "-" * max(width - 2, 1) + ":")
            else:
                separators.append("-" * width)
        return "\n".join([line(headers), "| " + " | ".join(separators) + " |", *body])

    border = "+-" + "-+-".join("-" * w for w in widths) + "-+"
    return "\n".join([border, line(headers), border, *body, border])


def format_summary(
    records: list[ScenarioRunRecord],
    execution_name: str | None = None,
    fmt: str = "terminal",
) -> str:
    """Summary table for one execution (the latest when not given)."""
    if not records:
        return "No stored results found."

    if execution_name is None:
        execution_name = records[-1].execution_name

    run_records = [r for r in records if r.execution_name == execution_name]
    if not run_records:
        return f"No records found for execution={execution_name}"

    names = metric_names(run_records)
    first = run_records[0]
    title = f"Execution: {execution_name} | {first.git.branch}@{first.git.commit}"
    model_info = (
        f"Model: {first.environment.llm_provider}/{first.environment.llm_model} | "
        f"Judge: {first.environment.eval_provider}/{first.environment.eval_model}"
    )
    if first.tags:
        model_info += f" | Tags: {', '.join(first.tags)}"

    headers = ["Scenario", "Iteration", *[truncate(n, 20) for n in names], "Pass", "Duration"]
    alignments = ["l", "l", *["r"] * len(names), "c", "r"]

    rows = []
    for r in run_records:
        by_name = {m.name: m for m in r.metrics}
        rows.append([
            truncate(r.scenario_name, 40),
            r.iteration_name,
            *[metric_cell(by_name.get(n)) for n in names],
            "Y" if r.passed else "N",
            f"{r.duration_seconds:.1f}s",
        ])

    table = format_table(headers, rows, alignments, fmt=fmt)
    failures = _failure_details(run_records)

    if fmt == "markdown":
        output = f"## {title}\n\n{model_info}\n\n{table}"
    else:
        output = f"{title}\n{model_info}\n\n{table}"
    if failures:
        output += "\n\n" + "\n".join(failures)
    return output


def _failure_details(records: list[ScenarioRunRecord]) -> list[str]:
    """One line per failed metric with its rationale."""
    lines = []
    for r in records:
        for m in r.metrics:
            if not m.failed:
                continue
            why = m.interpretation_reason or m.reason
            lines.append(f"FAILED {r.scenario_name} {m.name}: {why}")
            lines.extend(f"    [{d.severity}] {d.message}" for d in m.diagnostics)
    return lines


def format_executions(records: list[ScenarioRunRecord], fmt: str = "terminal") -> str:
    """One row per stored execution with its pass count, newest last."""
    if not records:
        return "No stored results found."

    grouped: dict[str, list[ScenarioRunRecord]] = {}
    for r in records:
        grouped.setdefault(r.execution_name, []).append(r)

    rows = []
    for name, runs in grouped.items():
        passed = sum(1 for r in runs if r.passed)
        rows.append([
            name,
            f"{runs[0].git.branch}@{runs[0].git.commit}",
            runs[0].environment.llm_model,
            str(len(runs)),
            f"{passed}/{len(runs)}",
        ])
    return format_table(
        ["Execution", "Commit", "Model", "Scenarios", "Passed"],
        rows,
        ["l", "l", "l", "r", "r"],
        fmt=fmt,
    )


def execution_failed(records: list[ScenarioRunRecord], execution_name: str | None = None) -> bool:
    """Whether any run of the execution (the latest when not given) failed."""
    if not records:
        return False
    if execution_name is None:
        execution_name = records[-1].execution_name
    return any(not r.passed for r in records if r.execution_name == execution_name)
