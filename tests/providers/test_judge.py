"""Tests for judge LLM wrappers."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

from simple_evals.config import LLMProvider


class TestOpenAIJudgeLLM:
    """Tests for OpenAIJudgeLLM."""

    @patch("simple_evals.providers.openai_provider.AsyncAzureOpenAI")
    def test_azure_client(self, mock_azure: MagicMock) -> None:
        """provider=azure → AsyncAzureOpenAI with the endpoint and version."""
        from simple_evals.providers.judge import OpenAIJudgeLLM

        judge = OpenAIJudgeLLM(
            model_name="gpt-4o",
            api_key="test-key",
            endpoint="https://res.openai.azure.com/",
            provider=LLMProvider.AZURE,
            api_version="2024-10-21",
        )

        mock_azure.assert_called_once_with(
            azure_endpoint="https://res.openai.azure.com/",
            api_key="test-key",
            api_version="2024-10-21",
        )
        assert judge.get_model_name() == "gpt-4o"
        assert judge.load_model() is mock_azure.return_value

    @patch("simple_evals.providers.openai_provider.AsyncOpenAI")
    async def test_a_generate_uses_zero_temperature(self, mock_openai: MagicMock) -> None:
        from simple_evals.providers.judge import OpenAIJudgeLLM

        completion = MagicMock()
        completion.choices = [MagicMock()]
        completion.choices[0].message.content = '{"score": 8, "reason": "clear"}'
        mock_openai.return_value.chat.completions.create = AsyncMock(return_value=completion)
        judge = OpenAIJudgeLLM(model_name="gpt-4o", api_key="test-key")

        result = await judge.a_generate("Rate this.")

        assert result == '{"score": 8, "reason": "clear"}'
        mock_openai.return_value.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o",
            messages=[{"role": "user", "content": "Rate this."}],
            temperature=0.0,
        )

    @patch("simple_evals.providers.openai_provider.AsyncOpenAI")
    def test_generate_runs_async_call(self, mock_openai: MagicMock) -> None:
        from simple_evals.providers.judge import OpenAIJudgeLLM

        completion = MagicMock()
        completion.choices = [MagicMock()]
        completion.choices[0].message.content = None
        mock_openai.return_value.chat.completions.create = AsyncMock(return_value=completion)
        judge = OpenAIJudgeLLM(model_name="gpt-4o", api_key="test-key")

        assert judge.generate("Rate this.") == ""


class TestAnthropicJudgeLLM:
    """Tests for AnthropicJudgeLLM."""

    @patch("anthropic.AsyncAnthropic")
    def test_base_url_only_when_endpoint_set(self, mock_anthropic: MagicMock) -> None:
        from simple_evals.providers.judge import AnthropicJudgeLLM

        AnthropicJudgeLLM(model_name="claude-sonnet-4-5", api_key="test-key")
        AnthropicJudgeLLM(
            model_name="claude-sonnet-4-5", api_key="test-key", endpoint="https://proxy/"
        )

        assert mock_anthropic.call_args_list[0].kwargs == {"api_key": "test-key"}
        assert mock_anthropic.call_args_list[1].kwargs == {
            "api_key": "test-key",
            "base_url": "https://proxy/",
        }

    @patch("anthropic.AsyncAnthropic")
    async def test_a_generate_joins_text_blocks(self, mock_anthropic: MagicMock) -> None:
        from simple_evals.providers.judge import AnthropicJudgeLLM

        message = MagicMock()
        message.content = [
            MagicMock(type="text", text="line one"),
            MagicMock(type="thinking", text="hidden"),
            MagicMock(type="text", text="line two"),
        ]
        mock_anthropic.return_value.messages.create = AsyncMock(return_value=message)
        judge = AnthropicJudgeLLM(model_name="claude-sonnet-4-5", api_key="test-key")

        assert await judge.a_generate("Rate this.") == "line one\nline two"


class TestGoogleJudgeLLM:
    """Tests for GoogleJudgeLLM."""

    @patch("google.genai.Client")
    def test_uses_api_key(self, mock_client_cls: MagicMock) -> None:
        from simple_evals.providers.judge import GoogleJudgeLLM

        judge = GoogleJudgeLLM(model_name="gemini-2.5-flash", api_key="test-key")

        mock_client_cls.assert_called_once_with(api_key="test-key")
        assert judge.get_model_name() == "gemini-2.5-flash"
