"""Metric, interpretation and diagnostic types produced by evaluators."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from simple_evals.errors import ConfigurationError, MetricNotFoundError

MIN_SCORE = 1.0
MAX_SCORE = 5.0
MIN_PASSING_SCORE = 4.0


class _NamedIntEnum(IntEnum):
    """IntEnum that also parses from its member names."""

    @classmethod
    def parse(cls, value: Any) -> Any:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
            if key.isdigit():
                return cls(int(key))
            raise ValueError(f"Unknown {cls.__name__}: {value!r}")
        if isinstance(value, int):
            return cls(value)
        return value

    @property
    def label(self) -> str:
        return self.name.title()


class EvaluationRating(_NamedIntEnum):
    """Qualitative bucket for a metric, ordered worst to best."""

    UNACCEPTABLE = 1
    POOR = 2
    AVERAGE = 3
    GOOD = 4
    EXCEPTIONAL = 5


class DiagnosticSeverity(_NamedIntEnum):
    """Severity of an anomaly met while scoring."""

    INFORMATIONAL = 0
    WARNING = 1
    ERROR = 2


@dataclass(frozen=True)
class Diagnostic:
    """A structured note about the scoring process itself."""

    severity: DiagnosticSeverity
    message: str

    @classmethod
    def info(cls, message: str) -> Diagnostic:
        return cls(DiagnosticSeverity.INFORMATIONAL, message)

    @classmethod
    def warning(cls, message: str) -> Diagnostic:
        return cls(DiagnosticSeverity.WARNING, message)

    @classmethod
    def error(cls, message: str) -> Diagnostic:
        return cls(DiagnosticSeverity.ERROR, message)

    def __str__(self) -> str:
        return f"[{self.severity.label}] {self.message}"


@dataclass(frozen=True)
class Interpretation:
    """Pass/fail reading of a metric value."""

    rating: EvaluationRating
    failed: bool = False
    reason: str = ""


@dataclass
class NumericMetric:
    """A named score on the 1-5 scale with its interpretation.

    ``value`` is None only when the evaluator could not produce a score; such
    metrics always carry a failed interpretation and an Error diagnostic.
    """

    name: str
    value: float | None = None
    reason: str = ""
    interpretation: Interpretation | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def contains_diagnostics(
        self, predicate: Callable[[Diagnostic], bool] | None = None
    ) -> bool:
        """Whether any diagnostic matches ``predicate`` (or any exists)."""
        if predicate is None:
            return bool(self.diagnostics)
        return any(predicate(d) for d in self.diagnostics)

    def diagnostics_at_least(self, severity: DiagnosticSeverity) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity >= severity]


def interpret_score(name: str, value: float) -> Interpretation:
    """Map a 1-5 value onto a rating.

    Buckets are (4, 5] Exceptional, (3, 4] Good, (2, 3] Average,
    (1, 2] Poor and 1 Unacceptable. Values below 4 fail.
    """
    if value > 4.0:
        rating = EvaluationRating.EXCEPTIONAL
    elif value > 3.0:
        rating = EvaluationRating.GOOD
    elif value > 2.0:
        rating = EvaluationRating.AVERAGE
    elif value > 1.0:
        rating = EvaluationRating.POOR
    else:
        rating = EvaluationRating.UNACCEPTABLE

    if value < MIN_PASSING_SCORE:
        return Interpretation(
            rating=rating,
            failed=True,
            reason=f"{name} is less than {MIN_PASSING_SCORE:g}.",
        )
    return Interpretation(rating=rating, reason=f"{name} is {value:g}.")


def failed_metric(name: str, error: Exception | str) -> NumericMetric:
    """A metric recording that its evaluator could not score the response."""
    message = str(error)
    return NumericMetric(
        name=name,
        value=None,
        reason="",
        interpretation=Interpretation(
            rating=EvaluationRating.UNACCEPTABLE,
            failed=True,
            reason=f"{name} could not be evaluated: {message}",
        ),
        diagnostics=[Diagnostic.error(message)],
    )


class EvaluationResult(Mapping[str, NumericMetric]):
    """Metrics keyed by name; each name may be inserted only once."""

    def __init__(self, metrics: list[NumericMetric] | None = None) -> None:
        self._metrics: dict[str, NumericMetric] = {}
        for metric in metrics or []:
            self.add(metric)

    def add(self, metric: NumericMetric) -> None:
        if metric.name in self._metrics:
            raise ConfigurationError(f"Duplicate metric name in result: {metric.name}")
        self._metrics[metric.name] = metric

    def merge(self, other: EvaluationResult) -> None:
        for metric in other.values():
            self.add(metric)

    def get(self, name: str) -> NumericMetric:  # type: ignore[override]
        """Return the metric called ``name``.

        Raises:
            MetricNotFoundError: If no such metric exists.
        """
        try:
            return self._metrics[name]
        except KeyError:
            raise MetricNotFoundError(name, list(self._metrics)) from None

    def __getitem__(self, name: str) -> NumericMetric:
        return self.get(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._metrics)

    def __len__(self) -> int:
        return len(self._metrics)

    def __repr__(self) -> str:
        return f"EvaluationResult({list(self._metrics.values())!r})"
