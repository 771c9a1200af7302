"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from simple_evals.config import EvalConfig, LLMProvider, default_execution_name, load_config
from simple_evals.errors import ConfigurationError, MissingConfigurationError
from simple_evals.evaluation.models import DiagnosticSeverity, EvaluationRating


@pytest.fixture
def azure_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIMPLE_EVALS_LLM_ENDPOINT", "https://example.openai.azure.com/")
    monkeypatch.setenv("SIMPLE_EVALS_LLM_API_KEY", "secret-key")
    monkeypatch.setenv("SIMPLE_EVALS_LLM_MODEL", "gpt-4o")


class TestLoadConfig:
    """Tests for load_config."""

    def test_loads_from_environment(self, azure_env: None) -> None:
        """All three required values present → config loads."""
        config = load_config()

        assert config.llm_provider == LLMProvider.AZURE
        assert config.llm_endpoint == "https://example.openai.azure.com/"
        assert config.llm_api_key.get_secret_value() == "secret-key"
        assert config.llm_model == "gpt-4o"

    def test_missing_api_key_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing API key is reported by name."""
        monkeypatch.setenv("SIMPLE_EVALS_LLM_ENDPOINT", "https://example.openai.azure.com/")
        monkeypatch.setenv("SIMPLE_EVALS_LLM_MODEL", "gpt-4o")

        with pytest.raises(MissingConfigurationError) as exc_info:
            load_config()

        assert exc_info.value.missing == ["llm_api_key"]
        assert "llm_api_key" in str(exc_info.value)

    def test_empty_values_count_as_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Whitespace-only values are treated as absent."""
        monkeypatch.setenv("SIMPLE_EVALS_LLM_ENDPOINT", "  ")
        monkeypatch.setenv("SIMPLE_EVALS_LLM_API_KEY", "")
        monkeypatch.setenv("SIMPLE_EVALS_LLM_MODEL", "gpt-4o")

        with pytest.raises(MissingConfigurationError) as exc_info:
            load_config()

        assert exc_info.value.missing == ["llm_endpoint", "llm_api_key"]

    def test_nothing_configured_reports_all(self) -> None:
        """Every missing value is listed, without duplicate judge entries."""
        with pytest.raises(MissingConfigurationError) as exc_info:
            load_config()

        assert exc_info.value.missing == ["llm_endpoint", "llm_api_key", "llm_model"]

    def test_missing_configuration_is_configuration_error(self) -> None:
        """MissingConfigurationError can be caught as a ConfigurationError."""
        with pytest.raises(ConfigurationError):
            load_config()

    def test_openai_does_not_require_endpoint(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Plain OpenAI uses the default base URL."""
        monkeypatch.setenv("SIMPLE_EVALS_LLM_PROVIDER", "openai")
        monkeypatch.setenv("SIMPLE_EVALS_LLM_API_KEY", "sk-test")
        monkeypatch.setenv("SIMPLE_EVALS_LLM_MODEL", "gpt-4o-mini")

        config = load_config()

        assert config.llm_provider == LLMProvider.OPENAI
        assert config.llm_endpoint == ""

    def test_reads_secrets_dir(self, tmp_path: Path) -> None:
        """Values can come from one-file-per-setting secret stores."""
        secrets = tmp_path / "secrets"
        secrets.mkdir()
        (secrets / "simple_evals_llm_endpoint").write_text("https://secret.openai.azure.com/")
        (secrets / "simple_evals_llm_api_key").write_text("from-secret-store")
        (secrets / "simple_evals_llm_model").write_text("gpt-4o")

        config = load_config(secrets_dir=secrets)

        assert config.llm_api_key.get_secret_value() == "from-secret-store"
        assert config.llm_endpoint == "https://secret.openai.azure.com/"

    def test_reads_env_file(self, tmp_path: Path) -> None:
        """The .env.eval file in the working directory is honored."""
        (tmp_path / ".env.eval").write_text(
            "SIMPLE_EVALS_LLM_ENDPOINT=https://file.openai.azure.com/\n"
            "SIMPLE_EVALS_LLM_API_KEY=file-key\n"
            "SIMPLE_EVALS_LLM_MODEL=gpt-4o\n"
        )

        config = load_config()

        assert config.llm_endpoint == "https://file.openai.azure.com/"

    def test_invalid_value_raises_configuration_error(self, azure_env: None) -> None:
        """Out-of-range thresholds are configuration errors."""
        with pytest.raises(ConfigurationError):
            load_config(min_score=9.0)

    def test_api_key_not_in_repr(self, azure_env: None) -> None:
        """Secrets are masked when the config is printed or logged."""
        config = load_config()

        assert "secret-key" not in repr(config)
        assert "secret-key" not in str(config.llm_api_key)


class TestJudgeSettings:
    """Tests for judge settings falling back to the chat settings."""

    def test_judge_defaults_to_chat_model(self, azure_env: None) -> None:
        config = load_config()

        assert config.judge_provider == LLMProvider.AZURE
        assert config.judge_endpoint == "https://example.openai.azure.com/"
        assert config.judge_api_key.get_secret_value() == "secret-key"
        assert config.judge_model == "gpt-4o"

    def test_judge_overrides(self, azure_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIMPLE_EVALS_EVAL_PROVIDER", "anthropic")
        monkeypatch.setenv("SIMPLE_EVALS_EVAL_API_KEY", "judge-key")
        monkeypatch.setenv("SIMPLE_EVALS_EVAL_MODEL", "claude-sonnet-4-5")

        config = load_config()

        assert config.judge_provider == LLMProvider.ANTHROPIC
        assert config.judge_api_key.get_secret_value() == "judge-key"
        assert config.judge_model == "claude-sonnet-4-5"
        assert config.judge_endpoint == ""

    def test_judge_on_azure_needs_endpoint(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An Azure judge behind a non-Azure chat model still needs an endpoint."""
        monkeypatch.setenv("SIMPLE_EVALS_LLM_PROVIDER", "openai")
        monkeypatch.setenv("SIMPLE_EVALS_LLM_API_KEY", "sk-test")
        monkeypatch.setenv("SIMPLE_EVALS_LLM_MODEL", "gpt-4o")
        monkeypatch.setenv("SIMPLE_EVALS_EVAL_PROVIDER", "azure")

        with pytest.raises(MissingConfigurationError) as exc_info:
            load_config()

        assert exc_info.value.missing == ["eval_endpoint"]


class TestGateSettings:
    """Tests for threshold and reporting defaults."""

    def test_defaults(self) -> None:
        config = EvalConfig()

        assert config.min_score == 4.0
        assert config.expected_ratings == [EvaluationRating.GOOD, EvaluationRating.EXCEPTIONAL]
        assert config.fail_on_severity == DiagnosticSeverity.WARNING
        assert config.enable_response_caching is True
        assert config.tags == ["simple-test"]
        assert config.execution_name == default_execution_name()

    def test_ratings_and_severity_parse_from_names(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIMPLE_EVALS_EXPECTED_RATINGS", '["exceptional"]')
        monkeypatch.setenv("SIMPLE_EVALS_FAIL_ON_SEVERITY", "error")

        config = EvalConfig()

        assert config.expected_ratings == [EvaluationRating.EXCEPTIONAL]
        assert config.fail_on_severity == DiagnosticSeverity.ERROR

    def test_comma_separated_ratings_from_environment(
        self, azure_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SIMPLE_EVALS_EXPECTED_RATINGS", "good, exceptional")

        config = load_config()

        assert config.expected_ratings == [EvaluationRating.GOOD, EvaluationRating.EXCEPTIONAL]

    def test_comma_separated_ratings_from_secrets_dir(
        self, azure_env: None, tmp_path: Path
    ) -> None:
        (tmp_path / "simple_evals_expected_ratings").write_text("average,good")

        config = load_config(secrets_dir=tmp_path)

        assert config.expected_ratings == [EvaluationRating.AVERAGE, EvaluationRating.GOOD]

    def test_unknown_rating_raises_configuration_error(
        self, azure_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SIMPLE_EVALS_EXPECTED_RATINGS", "good,superb")

        with pytest.raises(ConfigurationError, match="superb"):
            load_config()

    def test_undecodable_list_raises_configuration_error(
        self, azure_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Source decoding failures surface as configuration errors too."""
        monkeypatch.setenv("SIMPLE_EVALS_TAGS", "simple-test,nightly")

        with pytest.raises(ConfigurationError):
            load_config()

    def test_execution_name_is_stable(self) -> None:
        """One execution name per process."""
        assert EvalConfig().execution_name == EvalConfig().execution_name
        assert len(default_execution_name()) == len("20250101T000000")
