"""Google GenAI chat provider.

Gemini takes the system instruction as part of the request config and names
the assistant role "model".
"""

from __future__ import annotations

import httpx
from google import genai
from google.genai import errors, types

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


def to_google_contents(messages: list[ChatMessage]) -> tuple[str, list[types.Content]]:
    """Convert messages to a system instruction plus Gemini contents."""
    system_parts = []
    contents = []
    for message in messages:
        if message.role == ChatRole.SYSTEM:
            system_parts.append(message.content)
            continue
        role = "model" if message.role == ChatRole.ASSISTANT else "user"
        contents.append(
            types.Content(role=role, parts=[types.Part.from_text(text=message.content)])
        )
    return "\n\n".join(system_parts), contents


class GoogleChatClient(ChatClient):
    """Chat client for Google Gemini via API key."""

    def __init__(self, config: EvalConfig) -> None:
        self._model = config.llm_model
        self._client = genai.Client(api_key=config.llm_api_key.get_secret_value())

    @property
    def model_name(self) -> str:
        return self._model

    async def get_response(
        self, messages: list[ChatMessage], options: ChatOptions
    ) -> ChatResponse:
        """Send messages to the Google GenAI API."""
        system_instruction, contents = to_google_contents(messages)
        config = types.GenerateContentConfig(
            temperature=options.temperature,
            max_output_tokens=options.max_output_tokens,
            response_mime_type=(
                "application/json" if options.response_format == "json" else "text/plain"
            ),
        )
        if system_instruction:
            config.system_instruction = system_instruction

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
        except errors.APIError as e:
            raise ChatServiceError(
                f"google-genai returned status {e.code}: {e.message}",
                provider="google-genai",
                status_code=e.code,
            ) from e
        except httpx.HTTPError as e:
            raise ChatServiceError(
                f"google-genai request failed: {e}", provider="google-genai"
            ) from e

        usage = UsageDetails()
        if response.usage_metadata is not None:
            usage = UsageDetails(
                input_tokens=response.usage_metadata.prompt_token_count,
                output_tokens=response.usage_metadata.candidates_token_count,
                total_tokens=response.usage_metadata.total_token_count,
            )

        finish_reason = None
        if response.candidates and response.candidates[0].finish_reason is not None:
            finish_reason = str(response.candidates[0].finish_reason.value)

        return ChatResponse(
            text=response.text or "",
            model_id=response.model_version or self._model,
            usage=usage,
            finish_reason=finish_reason,
            raw=response,
        )
