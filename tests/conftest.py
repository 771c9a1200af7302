"""Shared pytest fixtures for simple-evaluations unit tests."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from simple_evals.conversation import ChatConfiguration, build_conversation
from simple_evals.providers.base import ChatMessage, ChatResponse
from tests.fakes import VENUS_ANSWER, FakeChatClient


@pytest.fixture(autouse=True)
def clean_eval_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real SIMPLE_EVALS_* settings and .env.eval out of unit tests."""
    for key in list(os.environ):
        if key.upper().startswith("SIMPLE_EVALS_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fake_chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def messages() -> list[ChatMessage]:
    """Astronomy persona plus the Venus question."""
    return build_conversation(
        "You are an AI assistant that can answer questions related to astronomy.",
        "How far is the planet Venus from the Earth at its closest and furthest points?",
    )


@pytest.fixture
def response() -> ChatResponse:
    return ChatResponse(text=VENUS_ANSWER, model_id="fake-model-2024")


@pytest.fixture
def judge() -> MagicMock:
    judge = MagicMock()
    judge.get_model_name.return_value = "fake-judge"
    return judge


@pytest.fixture
def chat_configuration(fake_chat_client: FakeChatClient, judge: MagicMock) -> ChatConfiguration:
    return ChatConfiguration(chat_client=fake_chat_client, judge=judge)
