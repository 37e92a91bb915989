"""OpenAI chat-completion client adapter."""

from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI, OpenAIError

from chat_relay.adapters.llm.base import (
    HEALTHY,
    UNHEALTHY,
    UNREACHABLE,
    AbstractLLMClient,
)


def _describe_status_error(exc: APIStatusError) -> str:
    """Flatten an error envelope into one line for logs and classification.

    The SDK exposes the ``error`` object of ``{"error": {...}}`` as ``body``.
    """
    body = exc.body
    if isinstance(body, dict):
        parts = [
            str(body[field])
            for field in ("message", "type", "code")
            if body.get(field)
        ]
        if parts:
            return " | ".join(parts)
    return exc.message


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI chat completions.

    Uses the official OpenAI Python SDK with async support. SDK-level retries
    are disabled: a failed call is reported once, never replayed.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-3.5-turbo", "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: float,
        **kwargs: Any,
    ) -> str:
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        allowed_params = {"top_p", "frequency_penalty", "presence_penalty", "seed", "user"}
        for param in allowed_params:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
        except APIStatusError as exc:
            raise RuntimeError(
                f"OpenAI API error ({exc.status_code}): {_describe_status_error(exc)}"
            ) from exc
        except OpenAIError as exc:
            raise RuntimeError(f"OpenAI API error: {exc}") from exc

        if not response.choices:
            return ""
        content = response.choices[0].message.content
        return (content or "").strip()

    async def probe(self) -> str:
        try:
            await self.client.models.list()
        except APIConnectionError:
            # Also covers APITimeoutError
            return UNREACHABLE
        except OpenAIError:
            return UNHEALTHY
        return HEALTHY
