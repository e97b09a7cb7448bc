"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING so the .env file is not loaded during tests.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

# Set default env vars that all tests might need
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4o-mini")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any  # noqa: E402

import pytest  # noqa: E402

from chat_gateway.adapters.llm.base import AbstractLLMClient  # noqa: E402
from chat_gateway.core import rate_limit as rate_limit_module  # noqa: E402


class FakeLLMClient(AbstractLLMClient):
    """In-process stand-in for the provider; records forwarded payloads."""

    def __init__(self, completion: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.completion = completion or {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "model": "gpt-4o-mini",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": "Bangkok is lovely in November."},
                    "finish_reason": "stop",
                }
            ],
        }
        self.error = error
        self.payloads: list[dict[str, Any]] = []

    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.completion


@pytest.fixture(autouse=True)
def fresh_rate_limiter(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with an empty process-wide limiter."""
    monkeypatch.setattr(rate_limit_module, "_limiter", None)
    monkeypatch.setattr(rate_limit_module, "_limiter_config", None)


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()
