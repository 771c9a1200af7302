"""Soft assertions over evaluation results.

Every rule is checked and every violation collected before a single
AssertionViolationError is raised, so one failing scenario reports all of
its failing metrics at once.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from simple_evals.errors import AssertionViolationError
from simple_evals.evaluation.models import (
    MIN_PASSING_SCORE,
    DiagnosticSeverity,
    EvaluationRating,
    EvaluationResult,
    NumericMetric,
)

if TYPE_CHECKING:
    from simple_evals.config import EvalConfig

DEFAULT_EXPECTED_RATINGS = frozenset({EvaluationRating.GOOD, EvaluationRating.EXCEPTIONAL})


@dataclass(frozen=True)
class MetricRule:
    """Thresholds one metric must meet.

    A metric violates the rule when its interpretation failed, its rating is
    not in ``expected_ratings``, any diagnostic has severity at or above
    ``fail_on_severity``, or its value is below ``min_value``.
    """

    metric_name: str
    expected_ratings: frozenset[EvaluationRating] = DEFAULT_EXPECTED_RATINGS
    min_value: float = MIN_PASSING_SCORE
    fail_on_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING


@dataclass(frozen=True)
class Violation:
    """A single failed check on a single metric."""

    metric_name: str
    rule: str
    actual: str
    reason: str = ""

    def __str__(self) -> str:
        text = f"{self.metric_name}: {self.rule} ({self.actual})"
        if self.reason:
            text += f" because: {self.reason}"
        return text


@dataclass
class ViolationCollector:
    """Accumulates violations across rule checks."""

    violations: list[Violation] = field(default_factory=list)

    def add(self, metric_name: str, rule: str, actual: str, reason: str = "") -> None:
        self.violations.append(Violation(metric_name, rule, actual, reason))

    def check(self, metric: NumericMetric, rule: MetricRule) -> None:
        """Record every way ``metric`` violates ``rule``."""
        interpretation = metric.interpretation

        if interpretation is None:
            self.add(metric.name, "interpretation is missing", "none", metric.reason)
        elif interpretation.failed:
            self.add(metric.name, "interpretation failed", "failed", interpretation.reason)

        if interpretation is not None and interpretation.rating not in rule.expected_ratings:
            expected = ", ".join(r.label for r in sorted(rule.expected_ratings))
            self.add(
                metric.name,
                f"rating should be one of [{expected}]",
                interpretation.rating.label,
                metric.reason,
            )

        flagged = metric.diagnostics_at_least(rule.fail_on_severity)
        if flagged:
            self.add(
                metric.name,
                f"has diagnostics at or above {rule.fail_on_severity.label}",
                "; ".join(str(d) for d in flagged),
            )

        if metric.value is None:
            self.add(
                metric.name,
                f"value should be at least {rule.min_value:g}",
                "no value",
                metric.reason,
            )
        elif metric.value < rule.min_value:
            self.add(
                metric.name,
                f"value should be at least {rule.min_value:g}",
                f"{metric.value:g}",
                metric.reason,
            )

    def raise_if_any(self) -> None:
        if self.violations:
            raise AssertionViolationError(self.violations)


def validate(result: EvaluationResult, rules: Iterable[MetricRule]) -> None:
    """Check every rule against ``result`` and report all violations together.

    Raises:
        MetricNotFoundError: If a rule names a metric the result lacks.
        AssertionViolationError: If any rule is violated.
    """
    rules = list(rules)
    # Resolve every metric first; an unknown name is a setup error, not a violation.
    metrics = [(result.get(rule.metric_name), rule) for rule in rules]

    collector = ViolationCollector()
    for metric, rule in metrics:
        collector.check(metric, rule)
    collector.raise_if_any()


def rules_for(metric_names: Iterable[str], config: EvalConfig | None = None) -> list[MetricRule]:
    """Build one rule per metric name from the configured thresholds."""
    if config is None:
        return [MetricRule(metric_name=name) for name in metric_names]
    return [
        MetricRule(
            metric_name=name,
            expected_ratings=frozenset(config.expected_ratings),
            min_value=config.min_score,
            fail_on_severity=config.fail_on_severity,
        )
        for name in metric_names
    ]
