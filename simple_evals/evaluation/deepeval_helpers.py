"""Helpers to convert conversations into DeepEval test cases."""

from __future__ import annotations

from deepeval.test_case import LLMTestCase

from simple_evals.providers.base import ChatMessage, ChatResponse


def render_conversation(messages: list[ChatMessage]) -> str:
    """Render the conversation history as role-labelled text.

    The judge sees the whole history (system persona included), since a
    response can only be judged coherent or relevant against it.
    """
    return "\n\n".join(f"{m.role.value.upper()}: {m.content}" for m in messages)


def to_test_case(messages: list[ChatMessage], response: ChatResponse) -> LLMTestCase:
    """Build a single-turn LLMTestCase from a conversation and its reply."""
    return LLMTestCase(
        input=render_conversation(messages),
        actual_output=response.text,
    )
