"""Pydantic schemas for the chat relay endpoints.

Prompt fields are typed ``Any`` on purpose: a missing or non-string prompt
must reach the moderation filter and come back as ``Invalid prompt`` (400),
not as a framework validation error.
"""

from __future__ import annotations

from typing import Any, List, Literal

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    """One prior conversation turn forwarded as context."""

    role: Literal["user", "assistant"] = Field(
        ..., description="Who produced the turn."
    )
    content: str = Field(..., description="Turn text.")


class GenerateRequest(BaseModel):
    """Body of the legacy ``POST /ai`` endpoint."""

    prompt: Any = Field(
        default=None,
        description="User prompt (3-200 characters).",
        examples=["Write a haiku about autumn"],
    )


class GenerateResponse(BaseModel):
    result: str = Field(..., description="Completion text.")


class ChatRequest(BaseModel):
    """Body of ``POST /api/openai``."""

    message: Any = Field(
        default=None,
        description="User message (3-200 characters).",
        examples=["What projects are on this site?"],
    )
    context: List[ChatTurn] | None = Field(
        default=None,
        description="Prior turns, oldest first. Only the most recent ones are forwarded.",
    )


class ChatResponse(BaseModel):
    reply: str = Field(..., description="Assistant reply.")


class ErrorResponse(BaseModel):
    """Error envelope shared by every endpoint."""

    error: str = Field(..., description="Caller-safe error message.")
    code: str | None = Field(default=None, description="Machine-readable error code.")
    request_id: str | None = Field(default=None)
    retryAfter: int | None = Field(
        default=None,
        description="Seconds until the client's window resets (per-client 429 only).",
    )
