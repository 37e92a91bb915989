"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports the settings module,
so the global Settings instance is built from test values.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-3.5-turbo")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("MOCK_API", "false")

from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from chat_relay.adapters.llm.base import HEALTHY, AbstractLLMClient
from chat_relay.core.app_factory import create_app
from chat_relay.core.config import AppSettings, LLMSettings, Settings


class StubLLMClient(AbstractLLMClient):
    """Upstream double with scriptable completion and probe results."""

    def __init__(self, reply: str = "hello!", status: str = HEALTHY) -> None:
        self.complete_mock = AsyncMock(return_value=reply)
        self.status = status

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: float,
        **kwargs: Any,
    ) -> str:
        return await self.complete_mock(
            messages, max_tokens=max_tokens, temperature=temperature, **kwargs
        )

    async def probe(self) -> str:
        return self.status


@pytest.fixture
def stub_llm() -> StubLLMClient:
    return StubLLMClient()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        llm=LLMSettings(provider="openai", api_key="test-key-123"),
        app=AppSettings(),
    )


@pytest.fixture
def app(test_settings: Settings, stub_llm: StubLLMClient):
    return create_app(test_settings, llm_client=stub_llm)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
