"""Scenario run recording and persistence.

ReportingConfiguration holds everything shared by the scenarios of one
execution: where results go, which evaluators run, and the chat clients.
Each scenario opens a ScenarioRun, evaluates through it, and the run writes
one JSON record when it closes.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
import time
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING

from simple_evals.conversation import ChatConfiguration
from simple_evals.errors import ReportStorageError
from simple_evals.evaluation.base import CompositeEvaluator, Evaluator
from simple_evals.providers.caching import DEFAULT_TTL_SECONDS, CachingChatClient
from simple_evals.reporting.models import (
    DiagnosticRecord,
    EnvironmentRecord,
    GitRecord,
    MetricRecord,
    ScenarioRunRecord,
)

if TYPE_CHECKING:
    from simple_evals.config import EvalConfig
    from simple_evals.evaluation.models import EvaluationResult, NumericMetric
    from simple_evals.providers.base import ChatMessage, ChatResponse

logger = logging.getLogger(__name__)

RESULTS_DIRNAME = "results"
CACHE_DIRNAME = "cache"


def _get_git_info() -> GitRecord:
    """Get current git commit and branch."""
    try:
        commit = (
            subprocess.check_output(
                ["git", "rev-parse", "--short", "HEAD"],
                stderr=subprocess.DEVNULL,
            )
            .decode()
            .strip()
        )
        branch = (
            subprocess.check_output(
                ["git", "rev-parse", "--abbrev-ref", "HEAD"],
                stderr=subprocess.DEVNULL,
            )
            .decode()
            .strip()
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        commit = "unknown"
        branch = "unknown"
    return GitRecord(commit=commit, branch=branch)


def safe_path_component(name: str) -> str:
    """Make a scenario or execution name usable as a single path segment."""
    cleaned = re.sub(r"[^\w.\-]+", "_", name).strip("._")
    return cleaned or "_"


def metric_to_record(metric: NumericMetric) -> MetricRecord:
    interpretation = metric.interpretation
    return MetricRecord(
        name=metric.name,
        value=metric.value,
        rating=interpretation.rating.label if interpretation else "",
        failed=interpretation.failed if interpretation else True,
        reason=metric.reason,
        interpretation_reason=interpretation.reason if interpretation else "",
        diagnostics=[
            DiagnosticRecord(severity=d.severity.label, message=d.message)
            for d in metric.diagnostics
        ],
    )


class ReportingConfiguration:
    """Shared settings for storing the scenario runs of one execution."""

    def __init__(
        self,
        storage_root: Path | str,
        evaluators: list[Evaluator],
        chat_configuration: ChatConfiguration,
        enable_response_caching: bool = False,
        execution_name: str | None = None,
        tags: list[str] | None = None,
        cache_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        environment: EnvironmentRecord | None = None,
    ) -> None:
        from simple_evals.config import default_execution_name

        self.storage_root = Path(storage_root)
        # Validates metric-name uniqueness up front
        self.evaluator = CompositeEvaluator(*evaluators)
        self.chat_configuration = chat_configuration
        self.enable_response_caching = enable_response_caching
        self.execution_name = execution_name or default_execution_name()
        self.tags = list(tags or [])
        self.cache_ttl_seconds = cache_ttl_seconds
        if environment is None:
            judge = chat_configuration.judge
            judge_model = getattr(judge, "get_model_name", None)
            environment = EnvironmentRecord(
                llm_provider="unknown",
                llm_model=chat_configuration.chat_client.model_name,
                eval_provider="unknown",
                eval_model=judge_model() if judge_model else "unknown",
            )
        self.environment = environment
        self._git = _get_git_info()

    @classmethod
    def from_config(
        cls,
        config: EvalConfig,
        evaluators: list[Evaluator],
        chat_configuration: ChatConfiguration | None = None,
    ) -> ReportingConfiguration:
        """Disk-based reporting configured from the harness settings."""
        return cls(
            storage_root=config.storage_root,
            evaluators=evaluators,
            chat_configuration=chat_configuration or ChatConfiguration.from_config(config),
            enable_response_caching=config.enable_response_caching,
            execution_name=config.execution_name,
            tags=config.tags,
            cache_ttl_seconds=config.cache_ttl_hours * 3600,
            environment=EnvironmentRecord(
                llm_provider=config.llm_provider.value,
                llm_model=config.llm_model,
                eval_provider=config.judge_provider.value,
                eval_model=config.judge_model,
            ),
        )

    @property
    def results_dir(self) -> Path:
        return self.storage_root / RESULTS_DIRNAME

    @property
    def cache_dir(self) -> Path:
        return self.storage_root / CACHE_DIRNAME

    @property
    def git(self) -> GitRecord:
        return self._git

    def record_path(self, scenario_name: str, iteration_name: str) -> Path:
        return (
            self.results_dir
            / safe_path_component(self.execution_name)
            / safe_path_component(scenario_name)
            / f"{safe_path_component(iteration_name)}.json"
        )

    def scenario_chat_configuration(self) -> ChatConfiguration:
        """Chat configuration for a scenario, caching responses if enabled."""
        if not self.enable_response_caching:
            return self.chat_configuration
        client = CachingChatClient(
            self.chat_configuration.chat_client,
            cache_dir=self.cache_dir,
            ttl_seconds=self.cache_ttl_seconds,
        )
        return self.chat_configuration.with_chat_client(client)

    def create_scenario_run(self, scenario_name: str, iteration_name: str = "1") -> ScenarioRun:
        """Open a run for one scenario; use it as an async context manager."""
        return ScenarioRun(self, scenario_name, iteration_name)

    def write(self, record: ScenarioRunRecord) -> Path:
        """Persist a record. Records are never overwritten.

        Raises:
            ReportStorageError: If a record with the same key already exists.
        """
        path = self.record_path(record.scenario_name, record.iteration_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(path, "x", encoding="utf-8") as f:
                json.dump(asdict(record), f, indent=2)
        except FileExistsError:
            raise ReportStorageError(
                f"A result for execution={record.execution_name} "
                f"scenario={record.scenario_name} iteration={record.iteration_name} "
                f"already exists at {path}"
            ) from None
        logger.info(f"Recorded scenario={record.scenario_name} to {path}")
        return path


class ScenarioRun:
    """One scenario evaluated within an execution.

    The record is written when the ``async with`` block exits, provided
    ``evaluate`` was called.
    """

    def __init__(
        self,
        reporting: ReportingConfiguration,
        scenario_name: str,
        iteration_name: str = "1",
    ) -> None:
        self.reporting = reporting
        self.scenario_name = scenario_name
        self.iteration_name = iteration_name
        self.chat_configuration = reporting.scenario_chat_configuration()
        self.result: EvaluationResult | None = None
        self._messages: list[ChatMessage] = []
        self._response: ChatResponse | None = None
        self._start = 0.0
        self._duration = 0.0

    async def __aenter__(self) -> ScenarioRun:
        self._start = time.monotonic()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.result is None:
            logger.warning(
                f"Scenario {self.scenario_name} closed without an evaluation; nothing recorded"
            )
            return
        if exc is None:
            self.reporting.write(self.to_record())
            return
        try:
            self.reporting.write(self.to_record())
        except ReportStorageError as e:
            # Keep the scenario's own failure as the one that propagates
            logger.error(f"Could not record scenario {self.scenario_name}: {e}")

    async def evaluate(
        self, messages: list[ChatMessage], response: ChatResponse
    ) -> EvaluationResult:
        """Run every configured evaluator and keep the result for the record."""
        start = time.monotonic()
        result = await self.reporting.evaluator.evaluate(
            messages, response, self.chat_configuration
        )
        self._duration = time.monotonic() - start
        self._messages = list(messages)
        self._response = response
        self.result = result
        return result

    def to_record(self) -> ScenarioRunRecord:
        if self.result is None:
            raise ReportStorageError(f"Scenario {self.scenario_name} has not been evaluated")

        metrics = [metric_to_record(m) for m in self.result.values()]
        return ScenarioRunRecord(
            execution_name=self.reporting.execution_name,
            scenario_name=self.scenario_name,
            iteration_name=self.iteration_name,
            timestamp=datetime.now(timezone.utc).isoformat(),
            git=self.reporting.git,
            environment=self.reporting.environment,
            tags=list(self.reporting.tags),
            messages=[m.to_dict() for m in self._messages],
            response=self._response.to_dict() if self._response else {},
            metrics=metrics,
            passed=all(not m.failed for m in metrics),
            duration_seconds=round(self._duration, 2),
        )
