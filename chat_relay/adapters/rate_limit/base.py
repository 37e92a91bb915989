"""Admission gate interfaces.

The HTTP layer depends on this abstraction (not the concrete implementation)
so the counter storage can be swapped without touching the routes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

SCOPE_GLOBAL = "global"
SCOPE_CLIENT = "client"


@dataclass(frozen=True)
class AdmissionDecision:
    """Result of an admission check.

    Attributes:
        allowed: Whether the request may proceed.
        scope: Which counter denied the request (``global`` or ``client``),
            None when allowed.
        limit: Ceiling of the counter that made the decision.
        remaining: Requests left in the client's current window.
        retry_after_seconds: Suggested wait, only for per-client denials.
    """

    allowed: bool
    limit: int
    remaining: int
    scope: str | None = None
    retry_after_seconds: int | None = None


class AbstractAdmissionGate(ABC):
    """Interface for admission gates."""

    @abstractmethod
    def admit(self, client_id: str, now: float | None = None) -> AdmissionDecision:
        """Count a request from ``client_id`` and decide whether it proceeds.

        Denial is a normal return value; implementations must not raise for
        over-limit traffic.
        """
        raise NotImplementedError

    @abstractmethod
    def sweep(self, now: float | None = None) -> int:
        """Drop per-client state idle longer than the window.

        Returns:
            Number of entries removed.
        """
        raise NotImplementedError

    @abstractmethod
    def reset_global(self) -> None:
        """Reset the process-wide counter to zero."""
        raise NotImplementedError
