"""LLM adapter layer - abstracts over multiple LLM providers."""

from chat_gateway.adapters.llm.base import AbstractLLMClient
from chat_gateway.adapters.llm.factory import create_llm_client
from chat_gateway.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "OpenAIClient",
    "create_llm_client",
]
