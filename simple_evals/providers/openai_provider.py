"""OpenAI-compatible chat provider.

Covers OpenAI, Azure OpenAI (including AI Foundry deployments) and vLLM
endpoints. All use the OpenAI Python client with different base URLs.
"""

from __future__ import annotations

import logging
from typing import Any

import openai
from openai import AsyncAzureOpenAI, AsyncOpenAI

from simple_evals.config import EvalConfig, LLMProvider
from simple_evals.errors import ChatServiceError
from simple_evals.providers.base import (
    ChatClient,
    ChatMessage,
    ChatOptions,
    ChatResponse,
    UsageDetails,
)

logger = logging.getLogger(__name__)


def create_openai_client(
    provider: LLMProvider,
    api_key: str,
    endpoint: str,
    api_version: str,
) -> AsyncOpenAI:
    """Create an async OpenAI-compatible client for the given provider."""
    if provider == LLMProvider.AZURE:
        if not endpoint:
            raise ValueError("An endpoint is required for the azure provider")
        return AsyncAzureOpenAI(
            azure_endpoint=endpoint,
            api_key=api_key,
            api_version=api_version,
        )

    kwargs: dict[str, Any] = {"api_key": api_key}
    if endpoint:
        kwargs["base_url"] = endpoint
    elif provider == LLMProvider.VLLM:
        raise ValueError("An endpoint is required for the vllm provider")
    return AsyncOpenAI(**kwargs)


class OpenAIChatClient(ChatClient):
    """Chat client for OpenAI-compatible APIs (OpenAI, Azure, vLLM)."""

    def __init__(self, config: EvalConfig) -> None:
        self._provider = config.llm_provider
        self._model = config.llm_model
        self._client = create_openai_client(
            provider=config.llm_provider,
            api_key=config.llm_api_key.get_secret_value(),
            endpoint=config.llm_endpoint,
            api_version=config.azure_api_version,
        )

    @property
    def model_name(self) -> str:
        return self._model

    async def get_response(
        self, messages: list[ChatMessage], options: ChatOptions
    ) -> ChatResponse:
        """Send messages to an OpenAI-compatible endpoint."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [m.to_dict() for m in messages],
            "response_format": {
                "type": "json_object" if options.response_format == "json" else "text"
            },
        }
        if options.temperature is not None:
            kwargs["temperature"] = options.temperature
        if options.max_output_tokens is not None:
            kwargs["max_tokens"] = options.max_output_tokens

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            raise ChatServiceError(
                f"{self._provider.value} returned status {e.status_code}: {e.message}",
                provider=self._provider.value,
                status_code=e.status_code,
            ) from e
        except openai.APIError as e:
            raise ChatServiceError(
                f"{self._provider.value} request failed: {e}",
                provider=self._provider.value,
            ) from e

        if not response.choices:
            raise ChatServiceError(
                f"{self._provider.value} returned no choices",
                provider=self._provider.value,
            )

        choice = response.choices[0]
        usage = UsageDetails()
        if response.usage is not None:
            usage = UsageDetails(
                input_tokens=response.usage.prompt_tokens,
                output_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        return ChatResponse(
            text=choice.message.content or "",
            model_id=response.model,
            usage=usage,
            finish_reason=choice.finish_reason,
            raw=response,
        )
