"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from chat_relay.core.logging import (
    REDACTED,
    JsonFormatter,
    SensitiveDataFilter,
    clear_request_id,
    hash_identifier,
    redact,
    set_request_id,
)


@pytest.fixture
def capture():
    """Logger wired to a redacting JSON handler; yields (logger, stream)."""
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    yield logger, stream
    logger.handlers.clear()


def test_redacts_credentials(capture):
    logger, stream = capture

    logger.info(
        "test_event",
        extra={
            "api_key": "sk-secret-123",
            "authorization": "Bearer another-secret",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()
    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert REDACTED in output
    assert "visible" in output


def test_redacts_user_text_and_upstream_detail(capture):
    logger, stream = capture

    logger.info(
        "relay_event",
        extra={
            "prompt": "my private question",
            "upstream_detail": "Incorrect API key provided: sk-abc",
            "char_count": 19,
        },
    )

    output = stream.getvalue()
    assert "private question" not in output
    assert "sk-abc" not in output
    assert '"char_count": 19' in output


def test_message_field_is_not_redacted(capture):
    logger, stream = capture

    logger.info("rate_limit.exceeded", extra={"scope": "client"})

    payload = json.loads(stream.getvalue())
    assert payload["message"] == "rate_limit.exceeded"
    assert payload["scope"] == "client"
    assert payload["level"] == "info"


def test_redacts_nested_context(capture):
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "request": {
                "context": [{"role": "user", "content": "secret turn"}],
                "path": "/api/openai",
            },
        },
    )

    output = stream.getvalue()
    assert "secret turn" not in output
    assert "/api/openai" in output


def test_request_id_from_context(capture):
    logger, stream = capture
    set_request_id("req-123")
    try:
        logger.info("with_request_id")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-123"


def test_redact_helper_is_case_insensitive():
    assert redact({"API_KEY": "x", "n": [{"Prompt": "y"}]}) == {
        "API_KEY": REDACTED,
        "n": [{"Prompt": REDACTED}],
    }


def test_hash_identifier_is_stable_and_opaque():
    digest = hash_identifier("203.0.113.9")

    assert digest == hash_identifier("203.0.113.9")
    assert len(digest) == 16
    assert digest != "203.0.113.9"
