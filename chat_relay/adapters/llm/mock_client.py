"""Offline stand-in for the upstream provider (``MOCK_API=true``)."""

from typing import Any

from chat_relay.adapters.llm.base import HEALTHY, AbstractLLMClient


class MockLLMClient(AbstractLLMClient):
    """Echoes the latest user message without touching the network."""

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: float,
        **kwargs: Any,
    ) -> str:
        prompt = next(
            (m["content"] for m in reversed(messages) if m.get("role") == "user"),
            "",
        )
        return f'Mock response for: "{prompt}"'

    async def probe(self) -> str:
        return HEALTHY
