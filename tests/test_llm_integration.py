"""Integration tests for LLM adapter layer."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import OpenAIError

from chat_gateway.adapters.llm import OpenAIClient, create_llm_client
from chat_gateway.core.config import LLMSettings
from chat_gateway.core.errors import LLMAppError, ValidationAppError


def _completion(content: str = "Hello!") -> MagicMock:
    completion = MagicMock()
    completion.model_dump.return_value = {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "model": "gpt-4o-mini",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }
    return completion


class TestOpenAIClientIntegration:
    """OpenAI client with the SDK call patched out."""

    @pytest.mark.asyncio
    async def test_spreads_payload_into_sdk_call(self) -> None:
        client = OpenAIClient(api_key="test-key-123", model="gpt-4o-mini")
        payload = {
            "model": "gpt-4o",
            "messages": [{"role": "user", "content": "Hi"}],
            "temperature": 0.5,
        }

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(),
        ) as mock_create:
            result = await client.create_chat_completion(payload)

        assert mock_create.call_args.kwargs == payload
        assert result["choices"][0]["message"]["content"] == "Hello!"

    @pytest.mark.asyncio
    async def test_uses_default_model_and_keeps_other_fields(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-4o-mini")
        payload = {"messages": [{"role": "user", "content": "Hi"}], "stream": False}

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(),
        ) as mock_create:
            await client.create_chat_completion(payload)

        call_kwargs = mock_create.call_args.kwargs
        assert call_kwargs["model"] == "gpt-4o-mini"
        assert call_kwargs["stream"] is False
        # Caller's payload is left untouched
        assert "model" not in payload

    @pytest.mark.asyncio
    async def test_provider_error_becomes_llm_app_error(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-4o")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=OpenAIError("upstream unavailable"),
        ):
            with pytest.raises(LLMAppError, match="upstream unavailable") as exc:
                await client.create_chat_completion({"messages": []})

        assert exc.value.code == "llm_provider_error"
        assert exc.value.details == {"model": "gpt-4o", "provider_error": "OpenAIError"}


class TestLLMFactory:
    """Test LLM client factory pattern."""

    def test_create_llm_client_with_settings(self) -> None:
        client = create_llm_client(
            LLMSettings(
                provider="openai",
                api_key="test-key",
                model="gpt-4o-mini",
                base_url=None,
                timeout_seconds=30.0,
            )
        )

        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-4o-mini"

    def test_create_llm_client_defaults_to_global_settings(self) -> None:
        client = create_llm_client()

        assert isinstance(client, OpenAIClient)

    def test_create_llm_client_missing_api_key_raises_error(self) -> None:
        with pytest.raises(ValidationAppError, match="requires LLM_API_KEY") as exc:
            create_llm_client(LLMSettings(provider="openai", api_key=None, model="gpt-4o"))
        assert exc.value.code == "llm_missing_api_key"

    def test_create_llm_client_unknown_provider_raises_error(self) -> None:
        with pytest.raises(ValidationAppError, match="Unknown LLM provider") as exc:
            create_llm_client(
                LLMSettings(provider="unknown-provider", api_key="test-key", model="gpt-4o")
            )
        assert exc.value.code == "llm_unknown_provider"
