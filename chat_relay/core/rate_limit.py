"""Admission dependency for FastAPI routes.

Wires the admission gate adapter into the HTTP layer. The gate instance is
owned by the application (``app.state.admission_gate``), created by the app
factory, so each app gets independent counters.

Client identity is the peer address. Behind a reverse proxy all traffic
shares the proxy's address and therefore one bucket.
"""

from __future__ import annotations

import logging

from fastapi import Request

from chat_relay.adapters.rate_limit.base import SCOPE_GLOBAL, AbstractAdmissionGate
from chat_relay.adapters.rate_limit.in_memory import InMemoryAdmissionGate
from chat_relay.core.config import AppSettings, settings
from chat_relay.core.errors import RateLimitAppError
from chat_relay.core.logging import hash_identifier

logger = logging.getLogger(__name__)

CLIENT_LIMIT_MESSAGE = "Too many requests. Please wait before trying again."
GLOBAL_LIMIT_MESSAGE = "Server is busy. Too many requests, try again later."


def build_admission_gate(app_settings: AppSettings | None = None) -> InMemoryAdmissionGate:
    """Create a gate from configuration."""
    cfg = app_settings or settings.app
    return InMemoryAdmissionGate(
        max_requests=cfg.rate_limit_requests,
        window_seconds=cfg.rate_limit_window_seconds,
        global_limit=cfg.global_rate_limit_requests,
    )


def get_admission_gate(request: Request) -> AbstractAdmissionGate:
    return request.app.state.admission_gate


def client_identifier(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the admission gate.

    Declared ``async`` so it runs on the event loop, between suspension
    points of other requests.

    Raises:
        RateLimitAppError: When either the global ceiling or the client's
            window is exhausted.
    """

    cfg = getattr(request.app.state, "settings", settings)
    if not cfg.app.rate_limit_enabled:
        return

    gate = get_admission_gate(request)
    client_id = client_identifier(request)
    decision = gate.admit(client_id)

    if decision.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "client_hash": hash_identifier(client_id),
                "remaining": decision.remaining,
            },
        )
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "scope": decision.scope,
            "client_hash": hash_identifier(client_id),
            "limit": decision.limit,
            "retry_after_s": decision.retry_after_seconds,
        },
    )

    if decision.scope == SCOPE_GLOBAL:
        raise RateLimitAppError(
            code="server_overloaded",
            message=GLOBAL_LIMIT_MESSAGE,
            details={"scope": SCOPE_GLOBAL},
        )

    raise RateLimitAppError(
        code="rate_limited",
        message=CLIENT_LIMIT_MESSAGE,
        details={
            "scope": decision.scope or "client",
            "retry_after": decision.retry_after_seconds or 1,
        },
    )
