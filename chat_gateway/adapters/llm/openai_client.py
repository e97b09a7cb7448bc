"""OpenAI LLM client adapter."""

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from chat_gateway.adapters.llm.base import AbstractLLMClient
from chat_gateway.core.errors import LLMAppError

logger = logging.getLogger(__name__)


class OpenAIClient(AbstractLLMClient):
    """Passthrough client for OpenAI chat completions.
    
    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Default model name used when the payload omits one.
            base_url: Optional custom base URL for OpenAI-compatible APIs.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model

    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Spread the request body into ``chat.completions.create``.

        Args:
            payload: Chat completion request body (non-streaming).

        Returns:
            dict[str, Any]: The completion serialized with ``model_dump``.

        Raises:
            LLMAppError: If the API call fails.
        """
        request_params = dict(payload)
        request_params.setdefault("model", self.model)

        try:
            completion = await self.client.chat.completions.create(**request_params)
        except OpenAIError as exc:
            logger.warning(
                "chat.completion.failed",
                extra={"model": request_params["model"], "error_type": type(exc).__name__},
            )
            raise LLMAppError(
                code="llm_provider_error",
                message=str(exc) or "Upstream completion request failed",
                details={
                    "model": request_params["model"],
                    "provider_error": type(exc).__name__,
                },
            ) from exc

        return completion.model_dump()
