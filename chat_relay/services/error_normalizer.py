"""Map raw upstream failures to caller-safe messages.

Provider errors can embed request ids, account details or fragments of the
credential, so callers only ever see one of the canned strings below.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_FAILURE_MESSAGE = "AI request failed"


@dataclass(frozen=True)
class UpstreamFailure:
    code: str
    message: str
    markers: tuple[str, ...]


# Checked in order; the first rule with a matching marker wins.
UPSTREAM_FAILURES: tuple[UpstreamFailure, ...] = (
    UpstreamFailure(
        code="upstream_rate_limited",
        message="AI service is busy. Please try again shortly.",
        markers=("rate limit",),
    ),
    UpstreamFailure(
        code="upstream_quota_exceeded",
        message="AI service quota exceeded. Please try again later.",
        markers=("insufficient_quota", "quota"),
    ),
    UpstreamFailure(
        code="upstream_auth_failed",
        message="AI service authentication failed.",
        markers=("api key", "auth"),
    ),
    UpstreamFailure(
        code="upstream_model_unavailable",
        message="AI model is currently unavailable.",
        markers=("model",),
    ),
)

GENERIC_FAILURE = UpstreamFailure(
    code="upstream_error",
    message=DEFAULT_FAILURE_MESSAGE,
    markers=(),
)


def classify_upstream_error(raw: str | None) -> UpstreamFailure:
    """Pick the sanitized failure for a raw upstream error string.

    Matching is case-insensitive substring search.
    """
    if not raw:
        return GENERIC_FAILURE
    lowered = raw.lower()
    for failure in UPSTREAM_FAILURES:
        if any(marker in lowered for marker in failure.markers):
            return failure
    return GENERIC_FAILURE


def normalize_upstream_error(raw: str | None) -> str:
    """Return the caller-facing message for a raw upstream error string."""
    return classify_upstream_error(raw).message
