"""DeepEvalBaseLLM subclasses used as judge models.

The quality evaluators prompt a judge model through deepeval. Only plain
text generation is needed; structured output falls back to deepeval's own
JSON parsing because ``a_generate`` takes no ``schema`` argument.
"""

from __future__ import annotations

import asyncio
from typing import Any

from deepeval.models import DeepEvalBaseLLM

from simple_evals.config import LLMProvider

_JUDGE_TEMPERATURE = 0.0


class OpenAIJudgeLLM(DeepEvalBaseLLM):
    """Judge wrapper for OpenAI, Azure OpenAI and vLLM endpoints."""

    def __init__(
        self,
        model_name: str,
        api_key: str,
        endpoint: str = "",
        provider: LLMProvider = LLMProvider.OPENAI,
        api_version: str = "2024-10-21",
    ) -> None:
        self._model_name = model_name
        from simple_evals.providers.openai_provider import create_openai_client

        self._client = create_openai_client(
            provider=provider,
            api_key=api_key,
            endpoint=endpoint,
            api_version=api_version,
        )

    def get_model_name(self) -> str:
        return self._model_name

    def load_model(self) -> Any:
        return self._client

    async def a_generate(self, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self._model_name,
            messages=[{"role": "user", "content": prompt}],
            temperature=_JUDGE_TEMPERATURE,
        )
        return response.choices[0].message.content or ""

    def generate(self, prompt: str) -> str:
        return asyncio.run(self.a_generate(prompt))


class AnthropicJudgeLLM(DeepEvalBaseLLM):
    """Judge wrapper for Anthropic Claude."""

    def __init__(self, model_name: str, api_key: str, endpoint: str = "") -> None:
        self._model_name = model_name
        from anthropic import AsyncAnthropic

        kwargs: dict[str, Any] = {"api_key": api_key}
        if endpoint:
            kwargs["base_url"] = endpoint
        self._client = AsyncAnthropic(**kwargs)

    def get_model_name(self) -> str:
        return self._model_name

    def load_model(self) -> Any:
        return self._client

    async def a_generate(self, prompt: str) -> str:
        response = await self._client.messages.create(
            model=self._model_name,
            max_tokens=4096,
            temperature=_JUDGE_TEMPERATURE,
            messages=[{"role": "user", "content": prompt}],
        )
        return "\n".join(
            block.text for block in response.content if block.type == "text"
        )

    def generate(self, prompt: str) -> str:
        return asyncio.run(self.a_generate(prompt))


class GoogleJudgeLLM(DeepEvalBaseLLM):
    """Judge wrapper for Google Gemini."""

    def __init__(self, model_name: str, api_key: str) -> None:
        self._model_name = model_name
        from google import genai

        self._client = genai.Client(api_key=api_key)

    def get_model_name(self) -> str:
        return self._model_name

    def load_model(self) -> Any:
        return self._client

    async def a_generate(self, prompt: str) -> str:
        from google.genai import types

        response = await self._client.aio.models.generate_content(
            model=self._model_name,
            contents=prompt,
            config=types.GenerateContentConfig(temperature=_JUDGE_TEMPERATURE),
        )
        return response.text or ""

    def generate(self, prompt: str) -> str:
        return asyncio.run(self.a_generate(prompt))
