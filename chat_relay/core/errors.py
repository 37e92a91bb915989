"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    retry_after: int
    scope: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message, safe to show to callers.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input or configuration validation fails."""


class RateLimitAppError(AppError):
    """Raised when the admission gate denies a request."""

    @property
    def retry_after(self) -> int | None:
        if self.details is None:
            return None
        return self.details.get("retry_after")


class LLMAppError(AppError):
    """Raised when the upstream provider call fails.

    ``message`` is always one of the sanitized user-facing strings; the raw
    provider text only goes to the logs.
    """
