"""Astronomy assistant conversation shared by the scenarios."""

from __future__ import annotations

from simple_evals.conversation import build_conversation, get_response
from simple_evals.providers.base import ChatClient, ChatMessage, ChatResponse

SYSTEM_PROMPT = (
    "You are an AI assistant that can answer questions related to astronomy.\n"
    "Keep your responses concise staying under 100 words as much as possible.\n"
    "Use the imperial measurement system for all measurements in your response."
)

VENUS_QUESTION = "How far is the planet Venus from the Earth at its closest and furthest points?"
MOON_QUESTION = "How far is the Moon from the Earth at its closest and furthest points?"


async def astronomy_conversation(
    chat_client: ChatClient, question: str
) -> tuple[list[ChatMessage], ChatResponse]:
    """Ask the astronomy assistant ``question`` and return the exchange."""
    messages = build_conversation(SYSTEM_PROMPT, question)
    response = await get_response(chat_client, messages)
    return messages, response
