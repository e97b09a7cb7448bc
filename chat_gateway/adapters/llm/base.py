from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
    """Interface for upstream chat-completion providers."""

    @abstractmethod
    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Forward a chat completion request and return the provider's reply.

        Args:
            payload: Request body in OpenAI chat-completions shape. Must contain
                ``messages``; ``model`` falls back to the configured default.

        Returns:
            dict[str, Any]: The completion object as plain JSON data.

        Raises:
            LLMAppError: If the provider call fails.
        """
        ...
