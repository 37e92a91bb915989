"""Chat relay service: moderation, request shaping and upstream error policy.

This is the business layer between the HTTP routes and the LLM adapter:
- Runs the moderation filter over user text
- Builds the message list (system prompt, trimmed context, user turn)
- Calls the upstream client with bounded max_tokens and fixed temperature
- Converts upstream failures into sanitized LLMAppError messages
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from chat_relay.adapters.llm.base import AbstractLLMClient
from chat_relay.core.config import LLMSettings, settings
from chat_relay.core.errors import LLMAppError, ValidationAppError
from chat_relay.schemas.chat import ChatTurn
from chat_relay.services.error_normalizer import classify_upstream_error
from chat_relay.services.moderation import DEFAULT_POLICY, ModerationPolicy, validate

logger = logging.getLogger(__name__)

NO_TEXT_RETURNED = "No text returned"


class RelayService:
    """Relays moderated prompts to the upstream chat-completion provider."""

    def __init__(
        self,
        llm: AbstractLLMClient,
        *,
        policy: ModerationPolicy = DEFAULT_POLICY,
        llm_settings: LLMSettings | None = None,
        max_context_messages: int = 6,
    ) -> None:
        self.llm = llm
        self.policy = policy
        self.llm_settings = llm_settings or settings.llm
        self.max_context_messages = max_context_messages

    def moderate(self, text: Any) -> str:
        """Run the moderation filter, raising on rejection.

        Returns:
            The accepted text.

        Raises:
            ValidationAppError: With the rejection reason as message.
        """
        reason = validate(text, self.policy)
        if reason is None:
            return text

        logger.info(
            "moderation.rejected",
            extra={
                "reason_code": reason.code,
                "input_type": type(text).__name__,
                "char_count": len(text) if isinstance(text, str) else None,
            },
        )
        raise ValidationAppError(code=reason.code, message=reason.value)

    def build_messages(
        self,
        text: str,
        context: Sequence[ChatTurn] | None = None,
    ) -> list[dict[str, str]]:
        """Assemble the upstream message list.

        Only the most recent ``max_context_messages`` turns are kept.
        """
        messages: list[dict[str, str]] = []
        if self.llm_settings.system_prompt:
            messages.append({"role": "system", "content": self.llm_settings.system_prompt})

        if context and self.max_context_messages > 0:
            for turn in list(context)[-self.max_context_messages:]:
                messages.append({"role": turn.role, "content": turn.content})

        messages.append({"role": "user", "content": text})
        return messages

    async def _complete(self, messages: list[dict[str, str]]) -> str:
        try:
            return await self.llm.complete(
                messages,
                max_tokens=self.llm_settings.max_tokens,
                temperature=self.llm_settings.temperature,
            )
        except RuntimeError as exc:
            failure = classify_upstream_error(str(exc))
            logger.error(
                "upstream.error",
                extra={
                    "error_code": failure.code,
                    "error_type": type(exc.__cause__ or exc).__name__,
                    "upstream_detail": str(exc),
                    "message_count": len(messages),
                },
            )
            raise LLMAppError(code=failure.code, message=failure.message) from exc

    async def reply(self, text: Any, context: Sequence[ChatTurn] | None = None) -> str:
        """Moderate ``text`` and return the assistant reply.

        Raises:
            ValidationAppError: If moderation rejects the text.
            LLMAppError: If the upstream call fails (sanitized message).
        """
        accepted = self.moderate(text)
        messages = self.build_messages(accepted, context)
        content = await self._complete(messages)
        logger.info(
            "relay.completed",
            extra={
                "message_count": len(messages),
                "reply_chars": len(content),
            },
        )
        return content or NO_TEXT_RETURNED

    async def generate(self, prompt: Any) -> str:
        """Legacy single-prompt completion (no context, no system prompt)."""
        accepted = self.moderate(prompt)
        content = await self._complete([{"role": "user", "content": accepted}])
        return content or NO_TEXT_RETURNED

    async def upstream_status(self) -> str:
        return await self.llm.probe()
