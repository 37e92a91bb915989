from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from chat_relay.adapters.llm.base import HEALTHY

router = APIRouter(tags=["Health"])

LIVENESS_TEXT = "AI backend is running"


@router.get("/", response_class=PlainTextResponse)
def liveness() -> str:
    return LIVENESS_TEXT


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint.

    Probes the upstream model listing. ``status`` is ``ok`` only when the
    provider answers; the endpoint itself always returns 200.

    Returns:
        dict: ``status``, ``timestamp`` and per-service states.
    """

    openai_status = await request.app.state.relay_service.upstream_status()
    return {
        "status": "ok" if openai_status == HEALTHY else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {"openai": openai_status},
    }
