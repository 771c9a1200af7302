"""Conversation runner: sends one conversation and returns one response."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from simple_evals.providers.base import (
    ChatClient,
    ChatMessage,
    ChatOptions,
    ChatResponse,
    ChatRole,
)

if TYPE_CHECKING:
    from simple_evals.config import EvalConfig

logger = logging.getLogger(__name__)

DEFAULT_CHAT_OPTIONS = ChatOptions(temperature=0.0, response_format="text")


@dataclass(frozen=True)
class ChatConfiguration:
    """Clients a scenario needs: the model under test and the judge.

    Built once from the process-wide EvalConfig and passed explicitly into
    each scenario and evaluator.
    """

    chat_client: ChatClient
    judge: Any

    @classmethod
    def from_config(cls, config: EvalConfig) -> ChatConfiguration:
        from simple_evals.providers import create_chat_client, create_judge_llm

        return cls(
            chat_client=create_chat_client(config),
            judge=create_judge_llm(config),
        )

    def with_chat_client(self, chat_client: ChatClient) -> ChatConfiguration:
        return replace(self, chat_client=chat_client)


def build_conversation(system_prompt: str, question: str) -> list[ChatMessage]:
    """A system persona followed by a single user question."""
    return [
        ChatMessage(role=ChatRole.SYSTEM, content=system_prompt),
        ChatMessage(role=ChatRole.USER, content=question),
    ]


async def get_response(
    chat_client: ChatClient,
    messages: list[ChatMessage],
    options: ChatOptions = DEFAULT_CHAT_OPTIONS,
) -> ChatResponse:
    """Send ``messages`` once and return the model's reply.

    Raises:
        ValueError: If ``messages`` is empty.
        ChatServiceError: If the service call fails. Not retried here.
    """
    if not messages:
        raise ValueError("Cannot send an empty conversation")

    logger.debug(
        f"Requesting response from {chat_client.model_name} "
        f"({len(messages)} messages, temperature={options.temperature})"
    )
    response = await chat_client.get_response(list(messages), options)
    logger.info(
        f"Received {len(response.text)} chars from {response.model_id or chat_client.model_name}"
        + (" (cached)" if response.cached else "")
    )
    return response
