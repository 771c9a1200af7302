"""Exception types for the evaluation harness."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simple_evals.assertions import Violation


class EvalError(Exception):
    """Base class for all harness errors."""


class ConfigurationError(EvalError, ValueError):
    """The harness was set up inconsistently (e.g. duplicate metric names)."""


class MissingConfigurationError(ConfigurationError):
    """One or more required settings are absent or empty."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Missing required configuration: " + ", ".join(self.missing)
        )


class ChatServiceError(EvalError):
    """The chat completion service failed or returned a non-success status."""

    def __init__(
        self,
        message: str,
        provider: str = "",
        status_code: int | None = None,
    ) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class EvaluatorError(EvalError):
    """An evaluator could not produce a score."""

    def __init__(self, evaluator: str, message: str) -> None:
        self.evaluator = evaluator
        super().__init__(f"{evaluator}: {message}")


class MetricNotFoundError(EvalError, KeyError):
    """A metric was requested by a name the result does not contain."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(name)

    def __str__(self) -> str:
        return f"Metric '{self.name}' not found (available: {', '.join(self.available) or 'none'})"


class ReportStorageError(EvalError):
    """A scenario run record could not be persisted."""


class AssertionViolationError(AssertionError):
    """Raised once per scenario with every violated metric rule."""

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = list(violations)
        lines = [f"{len(self.violations)} metric rule(s) violated:"]
        lines.extend(f"  - {v}" for v in self.violations)
        super().__init__("\n".join(lines))
