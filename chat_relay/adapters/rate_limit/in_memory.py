"""In-memory admission gate: per-client window plus a global backstop.

Notes:
- Per-process only: running multiple workers multiplies the effective limits.
- Guarded by a re-entrant lock so the gate can also be driven from worker
  threads; on the event loop the lock is never contended.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from chat_relay.adapters.rate_limit.base import (
    SCOPE_CLIENT,
    SCOPE_GLOBAL,
    AbstractAdmissionGate,
    AdmissionDecision,
)


@dataclass
class ClientWindow:
    window_start: float
    count: int


class InMemoryAdmissionGate(AbstractAdmissionGate):
    """Window counter keyed by client identifier, fronted by a global counter.

    A client's window opens on its first request and is replaced by a fresh
    one (``count=1``) once more than ``window_seconds`` have elapsed since it
    opened. Requests past ``max_requests`` in the same window are denied and
    still counted. The global counter is checked first and only goes back to
    zero when :meth:`reset_global` runs.
    """

    def __init__(
        self,
        *,
        max_requests: int = 5,
        window_seconds: float = 60.0,
        global_limit: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the gate.

        Args:
            max_requests: Allowed requests per client per window.
            window_seconds: Per-client window length in seconds.
            global_limit: Allowed requests across all clients between resets.
            clock: Time source returning seconds.

        Raises:
            ValueError: If a limit or the window is not positive.
        """
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        if global_limit < 1:
            raise ValueError("global_limit must be >= 1")

        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._global_limit = global_limit
        self._clock = clock
        self._lock = threading.RLock()
        self._windows: dict[str, ClientWindow] = {}
        self._global_count = 0

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def global_count(self) -> int:
        return self._global_count

    @property
    def tracked_clients(self) -> int:
        return len(self._windows)

    def get_window(self, client_id: str) -> ClientWindow | None:
        """Return the current window for ``client_id`` (None if untracked)."""
        return self._windows.get(client_id)

    def _retry_after(self, window: ClientWindow, now: float) -> int:
        remaining_s = window.window_start + self._window_seconds - now
        return max(1, int(math.ceil(remaining_s)))

    def _admit_client(self, client_id: str, now: float) -> AdmissionDecision:
        window = self._windows.get(client_id)
        if window is None or now - window.window_start > self._window_seconds:
            self._windows[client_id] = ClientWindow(window_start=now, count=1)
            return AdmissionDecision(
                allowed=True,
                limit=self._max_requests,
                remaining=self._max_requests - 1,
            )

        window.count += 1
        remaining = max(0, self._max_requests - window.count)
        if window.count > self._max_requests:
            return AdmissionDecision(
                allowed=False,
                limit=self._max_requests,
                remaining=0,
                scope=SCOPE_CLIENT,
                retry_after_seconds=self._retry_after(window, now),
            )
        return AdmissionDecision(
            allowed=True,
            limit=self._max_requests,
            remaining=remaining,
        )

    def admit(self, client_id: str, now: float | None = None) -> AdmissionDecision:
        """Count one request and decide whether it proceeds.

        Args:
            client_id: Caller identity (network address).
            now: Timestamp override; defaults to the gate's clock.

        Returns:
            AdmissionDecision. The global ceiling is evaluated first and a
            global denial leaves the client's window untouched.
        """
        if now is None:
            now = self._clock()

        with self._lock:
            if self._global_count >= self._global_limit:
                return AdmissionDecision(
                    allowed=False,
                    limit=self._global_limit,
                    remaining=0,
                    scope=SCOPE_GLOBAL,
                )
            self._global_count += 1
            return self._admit_client(client_id, now)

    def sweep(self, now: float | None = None) -> int:
        if now is None:
            now = self._clock()

        with self._lock:
            idle = [
                key
                for key, window in self._windows.items()
                if now - window.window_start > self._window_seconds
            ]
            for key in idle:
                del self._windows[key]
        return len(idle)

    def reset_global(self) -> None:
        with self._lock:
            self._global_count = 0
