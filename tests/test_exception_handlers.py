"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from chat_relay.core.errors import (
    AppError,
    LLMAppError,
    RateLimitAppError,
    ValidationAppError,
)
from chat_relay.core.exception_handlers import setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def handler_client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400(self, handler_client, app_with_handlers):
        @app_with_handlers.get("/test-validation")
        async def endpoint():
            raise ValidationAppError(code="prompt_too_long", message="Prompt too long")

        response = handler_client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Prompt too long"
        assert data["code"] == "prompt_too_long"
        assert "request_id" in data

    def test_rate_limit_error_returns_429_with_retry_after(self, handler_client, app_with_handlers):
        @app_with_handlers.get("/test-rate")
        async def endpoint():
            raise RateLimitAppError(
                code="rate_limited",
                message="Too many requests",
                details={"retry_after": 42},
            )

        response = handler_client.get("/test-rate")

        assert response.status_code == 429
        assert response.json()["retryAfter"] == 42
        assert response.headers["Retry-After"] == "42"

    def test_global_rate_limit_has_no_retry_hint(self, handler_client, app_with_handlers):
        @app_with_handlers.get("/test-global")
        async def endpoint():
            raise RateLimitAppError(code="server_overloaded", message="Server is busy")

        response = handler_client.get("/test-global")

        assert response.status_code == 429
        assert "retryAfter" not in response.json()

    def test_llm_error_returns_500(self, handler_client, app_with_handlers):
        @app_with_handlers.get("/test-llm")
        async def endpoint():
            raise LLMAppError(code="upstream_error", message="AI request failed")

        response = handler_client.get("/test-llm")

        assert response.status_code == 500
        assert response.json()["error"] == "AI request failed"

    def test_details_are_not_exposed(self, handler_client, app_with_handlers):
        @app_with_handlers.get("/test-details")
        async def endpoint():
            raise ValidationAppError(
                code="x",
                message="Bad input",
                details={"scope": "internal-only scope"},
            )

        response = handler_client.get("/test-details")

        assert "internal-only scope" not in response.text


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_general_exception_handler_logic(self):
        from chat_relay.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = RuntimeError("Unexpected error: upstream said sk-live-123")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["code"] == "internal_server_error"
        assert "sk-live" not in data["error"]

    def test_general_exception_handler_never_leaks_stack_trace(self):
        from chat_relay.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        response = asyncio.run(general_exception_handler(request, ValueError("details")))

        response_text = bytes(response.body).decode()
        assert "Traceback" not in response_text
        assert "ValueError" not in response_text


class TestErrorHandlerIntegration:
    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_multiple_handler_setups_does_not_fail(self):
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
