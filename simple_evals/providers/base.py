"""Base classes and dataclasses for the chat client abstraction.

Defines the ChatClient ABC each provider implements, plus the provider
neutral message, option and response types the harness passes around.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class ChatRole(str, Enum):
    """Author of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    """A single message in a conversation."""

    role: ChatRole
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class ChatOptions:
    """Generation parameters sent with a chat request."""

    temperature: float | None = 0.0
    response_format: str = "text"
    max_output_tokens: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class UsageDetails:
    """Token accounting reported by the service."""

    input_tokens: int | None = None
    output_tokens: int | None = None
    total_tokens: int | None = None


@dataclass
class ChatResponse:
    """Normalized response from any chat provider."""

    text: str
    model_id: str | None = None
    usage: UsageDetails = field(default_factory=UsageDetails)
    finish_reason: str | None = None
    cached: bool = False
    raw: Any = None

    @property
    def message(self) -> ChatMessage:
        """The response as an assistant message."""
        return ChatMessage(role=ChatRole.ASSISTANT, content=self.text)

    def to_dict(self) -> dict[str, Any]:
        """Serializable form without the raw SDK object."""
        return {
            "text": self.text,
            "model_id": self.model_id,
            "usage": asdict(self.usage),
            "finish_reason": self.finish_reason,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatResponse:
        return cls(
            text=data["text"],
            model_id=data.get("model_id"),
            usage=UsageDetails(**data.get("usage", {})),
            finish_reason=data.get("finish_reason"),
        )


class ChatClient(ABC):
    """Abstract base class for chat completion clients.

    Each provider converts the neutral message list into its native request,
    performs one call, and normalizes the reply into a ChatResponse.
    """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Deployed model name requests are sent to."""

    @abstractmethod
    async def get_response(
        self, messages: list[ChatMessage], options: ChatOptions
    ) -> ChatResponse:
        """Send the conversation and return the model's reply.

        Args:
            messages: Ordered conversation to send.
            options: Generation parameters.

        Returns:
            Normalized ChatResponse.

        Raises:
            ChatServiceError: On network, authentication, or status failures.
        """
