"""Admission (rate limiting) adapters.

This package keeps the counter storage behind a small interface so the
in-memory gate could later be replaced by a shared store without changing
the API layer.
"""

from chat_relay.adapters.rate_limit.base import AbstractAdmissionGate, AdmissionDecision
from chat_relay.adapters.rate_limit.in_memory import ClientWindow, InMemoryAdmissionGate

__all__ = [
    "AbstractAdmissionGate",
    "AdmissionDecision",
    "ClientWindow",
    "InMemoryAdmissionGate",
]
