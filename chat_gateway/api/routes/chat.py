import logging
from functools import lru_cache
from typing import Any, Dict

from fastapi import APIRouter, Depends

from chat_gateway.adapters.llm.base import AbstractLLMClient
from chat_gateway.adapters.llm.factory import create_llm_client
from chat_gateway.core.errors import ValidationAppError
from chat_gateway.core.rate_limit import enforce_chat_rate_limit
from chat_gateway.schemas.chat import ChatCompletionRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])


@lru_cache(maxsize=1)
def get_llm_client() -> AbstractLLMClient:
    """Build the provider client once, on first use."""
    return create_llm_client()


@router.post(
    "/services/chat/completions",
    dependencies=[Depends(enforce_chat_rate_limit)],
    responses={
        400: {"description": "Streaming was requested; this endpoint only returns whole completions."},
        429: {"description": "Too many requests from this client within the window."},
        502: {"description": "The upstream completion provider failed."},
    },
)
async def create_chat_completion(
    body: ChatCompletionRequest,
    llm: AbstractLLMClient = Depends(get_llm_client),
) -> Dict[str, Any]:
    """Basic chat completions without agent tools.

    Rate limited per client (5 requests per minute by default). The request
    body is forwarded to the provider as-is and the completion is returned
    unchanged, with X-RateLimit-* headers attached.

    Raises:
        ValidationAppError: ``stream: true`` was requested (400).
        LLMAppError: Provider failure, rendered as 502 by the global handler.
    """
    payload = body.to_provider_payload()
    if payload.get("stream"):
        raise ValidationAppError(
            code="streaming_not_supported",
            message="Streaming is not supported on this endpoint; omit \"stream\" or set it to false.",
        )
    completion = await llm.create_chat_completion(payload)

    logger.info(
        "chat.completion.ok",
        extra={
            "model": completion.get("model") or payload.get("model"),
            "message_count": len(body.messages),
        },
    )
    return completion
