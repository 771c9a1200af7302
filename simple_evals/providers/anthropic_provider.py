"""Anthropic chat provider.

Anthropic takes the system prompt as a top-level request parameter, so system
messages are hoisted out of the message list before sending.
"""

from __future__ import annotations

from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from simple_evals.config import EvalConfig
from simple_evals.errors import ChatServiceError
from simple_evals.providers.base import (
    ChatClient,
    ChatMessage,
    ChatOptions,
    ChatResponse,
    ChatRole,
    UsageDetails,
)

_MAX_TOKENS = 4096


def split_system_prompt(messages: list[ChatMessage]) -> tuple[str, list[dict[str, Any]]]:
    """Separate system messages from the conversation turns."""
    system_parts = []
    turns: list[dict[str, Any]] = []
    for message in messages:
        if message.role == ChatRole.SYSTEM:
            system_parts.append(message.content)
        else:
            turns.append(message.to_dict())
    return "\n\n".join(system_parts), turns


class AnthropicChatClient(ChatClient):
    """Chat client for Anthropic Claude."""

    def __init__(self, config: EvalConfig) -> None:
        self._model = config.llm_model
        kwargs: dict[str, Any] = {"api_key": config.llm_api_key.get_secret_value()}
        if config.llm_endpoint:
            kwargs["base_url"] = config.llm_endpoint
        self._client = AsyncAnthropic(**kwargs)

    @property
    def model_name(self) -> str:
        return self._model

    async def get_response(
        self, messages: list[ChatMessage], options: ChatOptions
    ) -> ChatResponse:
        """Send messages to the Anthropic API."""
        system_prompt, turns = split_system_prompt(messages)
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": options.max_output_tokens or _MAX_TOKENS,
            "messages": turns,
        }
        if system_prompt:
            kwargs["system"] = system_prompt
        if options.temperature is not None:
            kwargs["temperature"] = options.temperature

        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIStatusError as e:
            raise ChatServiceError(
                f"anthropic returned status {e.status_code}: {e.message}",
                provider="anthropic",
                status_code=e.status_code,
            ) from e
        except anthropic.APIError as e:
            raise ChatServiceError(
                f"anthropic request failed: {e}", provider="anthropic"
            ) from e

        text_parts = [block.text for block in response.content if block.type == "text"]
        usage = UsageDetails(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            total_tokens=response.usage.input_tokens + response.usage.output_tokens,
        )
        return ChatResponse(
            text="\n".join(text_parts),
            model_id=response.model,
            usage=usage,
            finish_reason=response.stop_reason,
            raw=response,
        )
