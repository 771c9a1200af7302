"""Factory functions for creating chat clients and judge LLMs.

Dispatches on LLMProvider enum values to instantiate the correct
client or judge implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from simple_evals.config import LLMProvider

if TYPE_CHECKING:
    from deepeval.models import DeepEvalBaseLLM

    from simple_evals.config import EvalConfig
    from simple_evals.providers.base import ChatClient


def create_chat_client(config: EvalConfig) -> ChatClient:
    """Create the chat client for the model under test.

    Args:
        config: Evaluation configuration.

    Returns:
        A ChatClient for the configured provider.

    Raises:
        ValueError: If the provider is not supported.
    """
    provider = config.llm_provider

    if provider in (LLMProvider.OPENAI, LLMProvider.VLLM, LLMProvider.AZURE):
        from simple_evals.providers.openai_provider import OpenAIChatClient

        return OpenAIChatClient(config)

    if provider == LLMProvider.ANTHROPIC:
        from simple_evals.providers.anthropic_provider import AnthropicChatClient

        return AnthropicChatClient(config)

    if provider == LLMProvider.GOOGLE_GENAI:
        from simple_evals.providers.google_provider import GoogleChatClient

        return GoogleChatClient(config)

    raise ValueError(f"Unsupported chat provider: {provider}")


def create_judge_llm(config: EvalConfig) -> DeepEvalBaseLLM:
    """Create the judge LLM the quality evaluators score with.

    Judge settings left unset fall back to the chat settings, so by default
    the model under test also judges its own responses.

    Args:
        config: Evaluation configuration.

    Returns:
        A DeepEvalBaseLLM instance.
    """
    provider = config.judge_provider
    api_key = config.judge_api_key.get_secret_value()

    if provider in (LLMProvider.OPENAI, LLMProvider.VLLM, LLMProvider.AZURE):
        from simple_evals.providers.judge import OpenAIJudgeLLM

        return OpenAIJudgeLLM(
            model_name=config.judge_model,
            api_key=api_key,
            endpoint=config.judge_endpoint,
            provider=provider,
            api_version=config.azure_api_version,
        )

    if provider == LLMProvider.ANTHROPIC:
        from simple_evals.providers.judge import AnthropicJudgeLLM

        return AnthropicJudgeLLM(
            model_name=config.judge_model,
            api_key=api_key,
            endpoint=config.judge_endpoint,
        )

    if provider == LLMProvider.GOOGLE_GENAI:
        from simple_evals.providers.judge import GoogleJudgeLLM

        return GoogleJudgeLLM(model_name=config.judge_model, api_key=api_key)

    raise ValueError(f"Unsupported judge provider: {provider}")
