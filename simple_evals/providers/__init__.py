"""Chat client and judge LLM providers for the evaluation harness."""

from simple_evals.providers.factory import create_chat_client, create_judge_llm

__all__ = ["create_chat_client", "create_judge_llm"]
