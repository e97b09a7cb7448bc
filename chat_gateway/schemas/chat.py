"""Pydantic schemas for the chat completions proxy."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """One conversation turn in OpenAI chat format."""

    role: str = Field(..., description="Author role: system, user, assistant or tool.")
    content: Any = Field(
        default=None,
        description="Message content: a string or a list of content parts.",
    )

    model_config = ConfigDict(extra="allow")


class ChatCompletionRequest(BaseModel):
    """Chat completion request body.

    Only ``messages`` is validated; every other field (temperature, tools,
    max_tokens, ...) is forwarded to the provider untouched.
    """

    messages: List[ChatMessage] = Field(
        ...,
        min_length=1,
        description="Conversation so far, oldest first.",
    )
    model: str | None = Field(
        default=None,
        description="Provider model name; the configured default is used when omitted.",
    )

    model_config = ConfigDict(extra="allow")

    def to_provider_payload(self) -> Dict[str, Any]:
        """Body to spread into the provider call.

        Fields the caller sent are kept as-is, explicit nulls included;
        ``model`` is dropped when null so the provider default applies.
        """
        payload = self.model_dump(exclude_unset=True)
        if payload.get("model") is None:
            payload.pop("model", None)
        return payload
