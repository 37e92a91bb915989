"""Application factory for the FastAPI app.

Builds the app and the state it owns for its whole lifetime:
- the admission gate (per-client windows and the global counter)
- the relay service wrapping the upstream client
- the interval tasks that sweep idle windows and reset the global counter
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from chat_relay.adapters.llm.base import AbstractLLMClient
from chat_relay.adapters.llm.factory import create_llm_client
from chat_relay.adapters.rate_limit.base import AbstractAdmissionGate
from chat_relay.api.routes import chat_router, health_router
from chat_relay.core.config import Settings, settings as default_settings
from chat_relay.core.exception_handlers import setup_exception_handlers
from chat_relay.core.logging import configure_logging
from chat_relay.core.middleware import request_id_middleware
from chat_relay.core.openapi import apply_openapi_customizations
from chat_relay.core.rate_limit import build_admission_gate
from chat_relay.core.scheduler import IntervalTask
from chat_relay.services.moderation import ModerationPolicy
from chat_relay.services.relay_service import RelayService

logger = logging.getLogger(__name__)


def _build_housekeeping(gate: AbstractAdmissionGate, cfg: Settings) -> list[IntervalTask]:
    def sweep() -> None:
        removed = gate.sweep()
        if removed:
            logger.debug("rate_limit.swept", extra={"removed": removed})

    return [
        IntervalTask("admission-sweep", cfg.app.sweep_interval_seconds, sweep),
        IntervalTask("global-reset", cfg.app.global_reset_interval_seconds, gate.reset_global),
    ]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the housekeeping timers while the app is serving."""
    tasks: list[IntervalTask] = app.state.housekeeping
    for task in tasks:
        task.start()
    logger.info("app.started", extra={"timers": [t.name for t in tasks]})
    try:
        yield
    finally:
        for task in tasks:
            await task.stop()
        logger.info("app.stopped")


def create_app(
    cfg: Settings | None = None,
    *,
    llm_client: AbstractLLMClient | None = None,
    admission_gate: AbstractAdmissionGate | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        cfg: Settings to use; defaults to the global settings.
        llm_client: Upstream client override (tests, embedding).
        admission_gate: Gate override; a fresh in-memory gate otherwise.

    Returns:
        Configured app with middleware, handlers, routers and owned state.
    """
    cfg = cfg or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)
    if cfg.app.debug:
        logging.getLogger("chat_relay").setLevel(logging.DEBUG)

    app = FastAPI(
        title="Chat Relay Gateway",
        description=(
            "Thin relay to a chat-completion API. Requests pass a per-client "
            "and global rate limit, then a moderation filter, before being "
            "forwarded upstream. Upstream failures are reported with "
            "sanitized messages only."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = cfg
    gate = admission_gate or build_admission_gate(cfg.app)
    app.state.admission_gate = gate
    app.state.relay_service = RelayService(
        llm_client or create_llm_client(cfg.llm),
        policy=ModerationPolicy.from_settings(cfg.moderation),
        llm_settings=cfg.llm,
        max_context_messages=cfg.app.max_context_messages,
    )
    app.state.housekeeping = _build_housekeeping(gate, cfg)

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(chat_router)

    apply_openapi_customizations(app)
    return app
