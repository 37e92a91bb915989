"""Async client for the relay's chat endpoint with server fallback.

Servers are tried in the configured order, one attempt each. When none of
them produces a reply the client answers locally with a canned offline
message so callers always get text back.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence

import httpx

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/openai"

_JOKES = (
    "Why don't scientists trust atoms? Because they make up everything!",
    "Why did the scarecrow win an award? He was outstanding in his field!",
    "What do you call a fake noodle? An impasta!",
)

_GENERIC_OFFLINE = (
    "That's an interesting question! The AI service is offline right now, "
    "so I can only give general answers.",
    "Thanks for your message! The AI service is temporarily unavailable.",
    "Good question! Ask again once the AI service is back for a detailed answer.",
    "I'd love to help with that. Full AI answers return when the service connection is restored.",
)

# (keywords, reply); first match wins
_OFFLINE_RULES: tuple[tuple[tuple[str, ...], str | tuple[str, ...]], ...] = (
    (
        ("hello", "hi", "hey"),
        "Hello! I'm in offline mode right now. When the AI service is available "
        "I can help with writing, code and analysis.",
    ),
    (
        ("weather",),
        "I can't check live weather data at the moment, but sunny days are "
        "great for going outside!",
    ),
    (("joke", "funny"), _JOKES),
    (
        ("help",),
        "I'd love to help! In offline mode I can only give general pointers; "
        "AI answers need the external service.",
    ),
    (
        ("code", "programming"),
        "Here's a simple Python example:\n\n```python\nprint('Hello, World!')\n```\n"
        "Once online I can help with harder programming questions.",
    ),
)


def offline_reply(message: str, rng: random.Random | None = None) -> str:
    """Pick a canned answer for ``message`` by keyword."""
    rng = rng or random.Random()
    lowered = message.lower()
    for keywords, reply in _OFFLINE_RULES:
        if any(keyword in lowered for keyword in keywords):
            return reply if isinstance(reply, str) else rng.choice(reply)
    return rng.choice(_GENERIC_OFFLINE)


@dataclass(frozen=True)
class RelayReply:
    """Answer returned by :meth:`RelayClient.send`.

    Attributes:
        text: Reply text.
        source: Base URL of the server that answered, None when offline.
    """

    text: str
    source: str | None = None

    @property
    def offline(self) -> bool:
        return self.source is None


class RelayClient:
    """Chat client that walks an ordered list of relay servers.

    Attributes:
        servers: Base URLs, tried in order.
        history: Accepted user/assistant turns, oldest first.
    """

    def __init__(
        self,
        servers: Sequence[str],
        *,
        timeout_seconds: float = 10.0,
        history_limit: int = 6,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if not servers:
            raise ValueError("at least one server is required")
        self.servers = [s.rstrip("/") for s in servers]
        self.timeout_seconds = timeout_seconds
        self.history_limit = history_limit
        self.history: list[dict[str, str]] = []
        self._transport = transport
        self._rng = rng or random.Random()

    def _context(self) -> list[dict[str, str]]:
        if self.history_limit <= 0:
            return []
        return self.history[-self.history_limit:]

    async def _ask(self, client: httpx.AsyncClient, server: str, message: str) -> str:
        response = await client.post(
            f"{server}{CHAT_PATH}",
            json={"message": message, "context": self._context()},
        )
        response.raise_for_status()
        data = response.json()
        reply = data.get("reply") if isinstance(data, dict) else None
        if not reply:
            raise ValueError("Invalid response format")
        return reply

    async def send(self, message: str) -> RelayReply:
        """Send ``message`` and return the first successful reply.

        Raises:
            ValueError: If ``message`` is blank.
        """
        message = message.strip()
        if not message:
            raise ValueError("message must not be empty")

        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            transport=self._transport,
        ) as client:
            for server in self.servers:
                try:
                    reply = await self._ask(client, server, message)
                except (httpx.HTTPError, ValueError) as exc:
                    logger.warning(
                        "relay_client.server_failed",
                        extra={"server": server, "error_type": type(exc).__name__},
                    )
                    continue

                self.history.append({"role": "user", "content": message})
                self.history.append({"role": "assistant", "content": reply})
                self.history = self._context()
                return RelayReply(text=reply, source=server)

        logger.info("relay_client.offline", extra={"servers_tried": len(self.servers)})
        return RelayReply(text=offline_reply(message, self._rng))
