"""LLM adapter layer - abstracts over the upstream chat-completion provider."""

from chat_relay.adapters.llm.base import AbstractLLMClient
from chat_relay.adapters.llm.factory import create_llm_client
from chat_relay.adapters.llm.mock_client import MockLLMClient
from chat_relay.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "MockLLMClient",
    "OpenAIClient",
    "create_llm_client",
]
