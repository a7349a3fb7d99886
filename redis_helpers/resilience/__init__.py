"""
redis-helpers — Resilience Module

Availability gate shared per store connection, connectivity error
classification, and the guarded-call helper used by the cache containers.
"""

from .classify import ConnectivityErrorKind, classify_connectivity_error
from .gate import GateState, ResilienceGate, gate_for
from .guard import guarded

__all__ = [
    # Classification
    "ConnectivityErrorKind",
    "classify_connectivity_error",
    # Gate
    "GateState",
    "ResilienceGate",
    "gate_for",
    # Guarded calls
    "guarded",
]
