"""Tests for upstream error normalization."""

import pytest

from chat_relay.services.error_normalizer import (
    DEFAULT_FAILURE_MESSAGE,
    UPSTREAM_FAILURES,
    classify_upstream_error,
    normalize_upstream_error,
)

QUOTA_RAW = (
    "OpenAI API error (429): You exceeded your current quota, please check your "
    "plan and billing details. | insufficient_quota | insufficient_quota"
)


def test_insufficient_quota_maps_to_quota_message() -> None:
    failure = classify_upstream_error(QUOTA_RAW)

    assert failure.code == "upstream_quota_exceeded"
    assert "quota" in failure.message.lower()
    assert QUOTA_RAW not in failure.message
    assert "billing" not in failure.message


@pytest.mark.parametrize(
    "raw, code",
    [
        ("Rate limit reached for gpt-3.5-turbo", "upstream_rate_limited"),
        ("insufficient_quota", "upstream_quota_exceeded"),
        ("monthly quota used", "upstream_quota_exceeded"),
        ("Incorrect API key provided: sk-abc***xyz", "upstream_auth_failed"),
        ("Authentication error", "upstream_auth_failed"),
        ("The model `gpt-9` does not exist", "upstream_model_unavailable"),
        ("Connection error.", "upstream_error"),
        ("", "upstream_error"),
        (None, "upstream_error"),
    ],
)
def test_classification(raw, code) -> None:
    assert classify_upstream_error(raw).code == code


def test_rules_checked_in_order() -> None:
    # mentions both a rate limit and a model: rate limit rule comes first
    assert (
        classify_upstream_error("Rate limit reached for model gpt-4o").code
        == "upstream_rate_limited"
    )


def test_unknown_errors_use_default_message() -> None:
    assert normalize_upstream_error("socket hang up") == DEFAULT_FAILURE_MESSAGE == "AI request failed"


def test_canned_messages_never_echo_markers_of_credentials() -> None:
    raw = "Incorrect API key provided: sk-live-123456"
    message = normalize_upstream_error(raw)

    assert "sk-live" not in message
    assert message in {f.message for f in UPSTREAM_FAILURES}
