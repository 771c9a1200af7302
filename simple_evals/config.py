"""Configuration for the simple-evaluations harness."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError

from simple_evals.errors import ConfigurationError, MissingConfigurationError
from simple_evals.evaluation.models import DiagnosticSeverity, EvaluationRating

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    """Chat completion service hosting the model under test."""

    OPENAI = "openai"
    AZURE = "azure"
    VLLM = "vllm"
    ANTHROPIC = "anthropic"
    GOOGLE_GENAI = "google-genai"


# Providers that cannot run without an explicit endpoint URL.
_ENDPOINT_REQUIRED = (LLMProvider.AZURE, LLMProvider.VLLM)


@lru_cache(maxsize=1)
def default_execution_name() -> str:
    """Timestamp naming this process's execution, computed once."""
    return datetime.now().strftime("%Y%m%dT%H%M%S")


class EvalConfig(BaseSettings):
    """Configuration for evaluation runs.

    Loaded from environment variables with the SIMPLE_EVALS_ prefix, a
    .env.eval file, or a secrets directory holding one file per setting.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIMPLE_EVALS_",
        env_file=".env.eval",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Chat model under test
    llm_provider: LLMProvider = Field(
        default=LLMProvider.AZURE,
        description="Chat completion provider",
    )
    llm_endpoint: str = Field(
        default="",
        description="Endpoint URL (Azure resource or OpenAI-compatible base URL)",
    )
    llm_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="API key for the chat endpoint",
    )
    llm_model: str = Field(
        default="",
        description="Deployed model name",
    )
    azure_api_version: str = Field(
        default="2024-10-21",
        description="API version sent to Azure OpenAI",
    )

    # Judge model; each unset value falls back to the chat setting
    eval_provider: LLMProvider | None = Field(
        default=None,
        description="Provider for the judge model",
    )
    eval_endpoint: str | None = Field(
        default=None,
        description="Endpoint URL for the judge model",
    )
    eval_api_key: SecretStr | None = Field(
        default=None,
        description="API key for the judge model",
    )
    eval_model: str | None = Field(
        default=None,
        description="Judge model name",
    )

    # Quality gate thresholds
    min_score: float = Field(
        default=4.0,
        ge=1.0,
        le=5.0,
        description="Minimum acceptable metric value on the 1-5 scale",
    )
    expected_ratings: Annotated[list[EvaluationRating], NoDecode] = Field(
        default_factory=lambda: [EvaluationRating.GOOD, EvaluationRating.EXCEPTIONAL],
        description="Ratings a passing metric may carry",
    )
    fail_on_severity: DiagnosticSeverity = Field(
        default=DiagnosticSeverity.WARNING,
        description="Diagnostics at or above this severity fail a metric",
    )

    # Report sink
    storage_root: Path = Field(
        default=Path("eval-reports"),
        description="Directory holding stored results and the response cache",
    )
    enable_response_caching: bool = Field(
        default=True,
        description="Reuse stored chat responses for identical requests",
    )
    cache_ttl_hours: float = Field(
        default=14 * 24,
        gt=0,
        description="How long a cached response stays valid",
    )
    execution_name: str = Field(
        default_factory=default_execution_name,
        description="Groups every scenario run of one execution",
    )
    tags: list[str] = Field(
        default_factory=lambda: ["simple-test"],
        description="Tags stored with every scenario run",
    )

    @field_validator("expected_ratings", mode="before")
    @classmethod
    def _parse_ratings(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip()
            if text.startswith("["):
                value = json.loads(text)
            else:
                value = [part for part in text.split(",") if part.strip()]
        if isinstance(value, list):
            return [EvaluationRating.parse(v) for v in value]
        return value

    @field_validator("fail_on_severity", mode="before")
    @classmethod
    def _parse_severity(cls, value: Any) -> Any:
        return DiagnosticSeverity.parse(value)

    @property
    def judge_provider(self) -> LLMProvider:
        return self.eval_provider or self.llm_provider

    @property
    def judge_endpoint(self) -> str:
        if self.eval_endpoint is not None:
            return self.eval_endpoint
        # A chat endpoint only makes sense for a judge on the same provider
        if self.judge_provider == self.llm_provider:
            return self.llm_endpoint
        return ""

    @property
    def judge_api_key(self) -> SecretStr:
        return self.eval_api_key or self.llm_api_key

    @property
    def judge_model(self) -> str:
        return self.eval_model or self.llm_model

    def missing_values(self) -> list[str]:
        """Names of required settings that are absent or empty."""
        missing: list[str] = []
        if self.llm_provider in _ENDPOINT_REQUIRED and not self.llm_endpoint.strip():
            missing.append("llm_endpoint")
        if not self.llm_api_key.get_secret_value().strip():
            missing.append("llm_api_key")
        if not self.llm_model.strip():
            missing.append("llm_model")

        if self.judge_provider in _ENDPOINT_REQUIRED and not self.judge_endpoint.strip():
            missing.append("eval_endpoint")
        if not self.judge_api_key.get_secret_value().strip():
            missing.append("eval_api_key")
        if not self.judge_model.strip():
            missing.append("eval_model")

        # Judge values that inherit from a missing chat value add no information
        inherited = {
            "eval_endpoint": "llm_endpoint",
            "eval_api_key": "llm_api_key",
            "eval_model": "llm_model",
        }
        return [
            name for name in missing
            if not (name in inherited and inherited[name] in missing)
        ]


def load_config(secrets_dir: str | Path | None = None, **overrides: Any) -> EvalConfig:
    """Resolve the harness configuration and check the required values.

    Args:
        secrets_dir: Optional directory of secret files, one per setting
            (e.g. ``simple_evals_llm_api_key``).
        **overrides: Explicit values taking precedence over every source.

    Returns:
        A validated EvalConfig.

    Raises:
        MissingConfigurationError: If the endpoint, API key, or model name
            is absent or empty.
        ConfigurationError: If a setting has an invalid value.
    """
    kwargs: dict[str, Any] = dict(overrides)
    if secrets_dir is not None:
        kwargs["_secrets_dir"] = Path(secrets_dir)

    try:
        config = EvalConfig(**kwargs)
    except (ValidationError, SettingsError) as e:
        raise ConfigurationError(f"Invalid evaluation configuration: {e}") from e

    missing = config.missing_values()
    if missing:
        raise MissingConfigurationError(missing)

    logger.debug(
        f"Loaded config: provider={config.llm_provider.value} model={config.llm_model} "
        f"judge={config.judge_provider.value}/{config.judge_model}"
    )
    return config
