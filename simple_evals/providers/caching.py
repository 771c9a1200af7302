"""Disk-backed response cache for chat clients.

Responses are stored as one JSON file per request under the cache directory,
named by the SHA-256 of the canonical request content. Repeated runs of a
conversation with identical content and options reuse the stored response
instead of calling the service again.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from simple_evals.providers.base import (
    ChatClient,
    ChatMessage,
    ChatOptions,
    ChatResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 14 * 24 * 60 * 60


def request_cache_key(
    model: str, messages: list[ChatMessage], options: ChatOptions
) -> str:
    """Stable key for a request's content."""
    payload = {
        "model": model,
        "messages": [m.to_dict() for m in messages],
        "options": options.to_dict(),
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class CachingChatClient(ChatClient):
    """Wraps a ChatClient, serving repeated requests from disk."""

    def __init__(
        self,
        inner: ChatClient,
        cache_dir: Path | str,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._inner = inner
        self.cache_dir = Path(cache_dir)
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def model_name(self) -> str:
        return self._inner.model_name

    @property
    def inner(self) -> ChatClient:
        return self._inner

    def _entry_path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    def _read(self, key: str) -> ChatResponse | None:
        path = self._entry_path(key)
        if not path.exists():
            return None
        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
            created = float(entry["created"])
            response = ChatResponse.from_dict(entry["response"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache entry {path.name}: {e}")
            return None

        if self._clock() - created > self._ttl_seconds:
            logger.debug(f"Cache entry {path.name} expired")
            return None
        response.cached = True
        return response

    def _write(self, key: str, request: dict[str, Any], response: ChatResponse) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        entry = {
            "created": self._clock(),
            "request": request,
            "response": response.to_dict(),
        }
        self._entry_path(key).write_text(json.dumps(entry, indent=2), encoding="utf-8")

    async def get_response(
        self, messages: list[ChatMessage], options: ChatOptions
    ) -> ChatResponse:
        """Return the cached response for this request, calling through on a miss."""
        key = request_cache_key(self.model_name, messages, options)
        cached = self._read(key)
        if cached is not None:
            logger.info(f"Response cache hit for {self.model_name} ({key[:12]})")
            return cached

        response = await self._inner.get_response(messages, options)
        self._write(
            key,
            {
                "model": self.model_name,
                "messages": [m.to_dict() for m in messages],
                "options": options.to_dict(),
            },
            response,
        )
        logger.debug(f"Cached response for {self.model_name} ({key[:12]})")
        return response
