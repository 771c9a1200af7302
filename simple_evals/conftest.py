"""Shared pytest fixtures for live response evaluations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from simple_evals.config import EvalConfig, load_config
from simple_evals.errors import ConfigurationError

if TYPE_CHECKING:
    from simple_evals.conversation import ChatConfiguration
    from simple_evals.reporting.recorder import ReportingConfiguration


@pytest.fixture(scope="session")
def eval_config() -> EvalConfig:
    """Load evaluation configuration; a missing or invalid setting ends the whole session."""
    try:
        return load_config()
    except ConfigurationError as e:
        pytest.exit(
            f"{e}. Check the SIMPLE_EVALS_* variables or .env.eval.",
            returncode=pytest.ExitCode.USAGE_ERROR,
        )


@pytest.fixture
def chat_configuration(eval_config: EvalConfig) -> ChatConfiguration:
    """Chat and judge clients for one scenario."""
    from simple_evals.conversation import ChatConfiguration

    return ChatConfiguration.from_config(eval_config)


@pytest.fixture
def reporting_configuration(
    eval_config: EvalConfig, chat_configuration: ChatConfiguration
) -> ReportingConfiguration:
    """Disk-based reporting with coherence and relevance evaluators."""
    from simple_evals.evaluation.quality import CoherenceEvaluator, RelevanceEvaluator
    from simple_evals.reporting.recorder import ReportingConfiguration

    return ReportingConfiguration.from_config(
        eval_config,
        evaluators=[CoherenceEvaluator(), RelevanceEvaluator()],
        chat_configuration=chat_configuration,
    )


@pytest.fixture
def scenario_name(request: pytest.FixtureRequest) -> str:
    """Fully qualified name of the running test, used as the scenario key."""
    cls = request.cls.__name__ + "." if request.cls else ""
    return f"{request.module.__name__}.{cls}{request.function.__name__}"
