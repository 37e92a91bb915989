from abc import ABC, abstractmethod
from typing import Any

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
UNREACHABLE = "unreachable"


class AbstractLLMClient(ABC):
	"""Interface for chat-completion clients."""

	@abstractmethod
	async def complete(
		self,
		messages: list[dict[str, str]],
		*,
		max_tokens: int,
		temperature: float,
		**kwargs: Any,
	) -> str:
		"""Run one chat completion and return the assistant text.

		Args:
			messages: Role-tagged messages, oldest first.
			max_tokens: Upper bound on generated tokens.
			temperature: Sampling temperature.
			**kwargs: Provider-specific options.

		Returns:
			str: Assistant message content ("" when the provider sent none).

		Raises:
			RuntimeError: If the provider call fails. The message carries the
				raw provider detail and must not be shown to callers.
		"""
		...

	@abstractmethod
	async def probe(self) -> str:
		"""Check provider reachability.

		Returns:
			One of ``healthy``, ``unhealthy`` or ``unreachable``.
		"""
		...
