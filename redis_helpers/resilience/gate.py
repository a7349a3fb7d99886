"""
redis-helpers — Resilience Gate

Tracks store availability and turns cache operations into no-ops during
outages.

State machine:
- starts ENABLED
- refused error  -> DISABLED until reset() (persistent outage, operator action)
- timeout error  -> DISABLED, re-enabled once the cooldown elapses (optimistic:
                    the store is assumed reachable again, nothing is probed)
- other errors   -> logged, no state change

Repeated timeouts push the re-enable deadline to now + cooldown. A gate
disabled by a refused connection stays disabled when timeouts follow.

One gate is shared by every container attached to the same store client
(see gate_for), so all of them observe an outage at the same time.
"""

from __future__ import annotations

import logging
import threading
import time
import weakref
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..config.schemas import DEFAULT_COOLDOWN_SECONDS
from .classify import ConnectivityErrorKind, classify_connectivity_error

if TYPE_CHECKING:
    from ..store.interface import StoreClient

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    """Availability state."""

    ENABLED = "enabled"
    DISABLED = "disabled"


class ResilienceGate:
    """
    Availability flag with a cooldown for timeout-class failures.

    Thread-safe: notifications may arrive from any thread while cache
    coroutines read the state.
    """

    def __init__(
        self,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        name: str = "default",
    ):
        """
        Initialize the gate.

        Args:
            cooldown_seconds: Delay before a timeout-disabled gate re-enables
            clock: Monotonic time source (injectable for tests)
            name: Label used in log records
        """
        if cooldown_seconds <= 0:
            raise ValueError("cooldown_seconds must be positive")

        self.cooldown_seconds = cooldown_seconds
        self.name = name
        self._clock = clock
        self._lock = threading.Lock()

        self._reason: ConnectivityErrorKind | None = None
        self._reenable_at: float | None = None

        self._counts = {kind: 0 for kind in ConnectivityErrorKind}

    # ------------ Notifications ------------

    def on_connectivity_error(self, error: BaseException) -> ConnectivityErrorKind:
        """
        Classify a connectivity error and update the state.

        Never raises; the error is logged and absorbed.

        Args:
            error: Exception reported by the store client

        Returns:
            The class the error was assigned to
        """
        kind = classify_connectivity_error(error)
        log_extra = {"gate": self.name, "kind": kind.value, "error": str(error), "error_type": type(error).__name__}

        with self._lock:
            self._counts[kind] += 1

            if kind is ConnectivityErrorKind.REFUSED:
                self._reason = ConnectivityErrorKind.REFUSED
                self._reenable_at = None
                logger.error(
                    "Store connection refused, cache disabled until reset: %s",
                    error,
                    extra=log_extra,
                )
            elif kind is ConnectivityErrorKind.TIMEOUT:
                if self._reason is ConnectivityErrorKind.REFUSED:
                    logger.warning(
                        "Store timeout while disabled by a refused connection: %s",
                        error,
                        extra=log_extra,
                    )
                else:
                    self._reason = ConnectivityErrorKind.TIMEOUT
                    self._reenable_at = self._clock() + self.cooldown_seconds
                    logger.warning(
                        "Store timed out, cache disabled for %.1fs: %s",
                        self.cooldown_seconds,
                        error,
                        extra={**log_extra, "cooldown_seconds": self.cooldown_seconds},
                    )
            else:
                logger.warning("Store error (state unchanged): %s", error, extra=log_extra)

        return kind

    # ------------ State ------------

    def is_disabled(self) -> bool:
        """True while cache operations must not touch the store."""
        with self._lock:
            self._expire_cooldown()
            return self._reason is not None

    @property
    def state(self) -> GateState:
        return GateState.DISABLED if self.is_disabled() else GateState.ENABLED

    @property
    def reason(self) -> ConnectivityErrorKind | None:
        """Why the gate is disabled, or None when enabled."""
        with self._lock:
            self._expire_cooldown()
            return self._reason

    def _expire_cooldown(self) -> None:
        # Caller holds the lock
        if self._reason is ConnectivityErrorKind.TIMEOUT and self._reenable_at is not None:
            if self._clock() >= self._reenable_at:
                self._reason = None
                self._reenable_at = None
                logger.info("Store cooldown elapsed, cache re-enabled", extra={"gate": self.name})

    def reset(self) -> None:
        """Re-enable the gate immediately, whatever disabled it."""
        with self._lock:
            was = self._reason
            self._reason = None
            self._reenable_at = None

        if was is not None:
            logger.info("Cache gate reset", extra={"gate": self.name, "previous_reason": was.value})

    # ------------ Client wiring ------------

    def attach(self, client: StoreClient) -> None:
        """Subscribe to a store client's connectivity error channel."""
        client.add_error_listener(self.on_connectivity_error)

    def detach(self, client: StoreClient) -> None:
        client.remove_error_listener(self.on_connectivity_error)

    def get_stats(self) -> dict[str, Any]:
        """Return current state and error counters."""
        with self._lock:
            self._expire_cooldown()
            remaining = None
            if self._reenable_at is not None:
                remaining = round(max(0.0, self._reenable_at - self._clock()), 3)

            return {
                "gate": self.name,
                "state": (GateState.DISABLED if self._reason else GateState.ENABLED).value,
                "reason": self._reason.value if self._reason else None,
                "cooldown_seconds": self.cooldown_seconds,
                "cooldown_remaining": remaining,
                "refused_errors": self._counts[ConnectivityErrorKind.REFUSED],
                "timeout_errors": self._counts[ConnectivityErrorKind.TIMEOUT],
                "other_errors": self._counts[ConnectivityErrorKind.OTHER],
            }


# One gate per store client, dropped with the client
_gates: weakref.WeakKeyDictionary[Any, ResilienceGate] = weakref.WeakKeyDictionary()
_gates_lock = threading.Lock()


def gate_for(client: StoreClient, cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS) -> ResilienceGate:
    """
    Get or create the gate shared by every container on a store client.

    The first caller's cooldown wins; later callers get the existing gate.

    Args:
        client: Store client the gate listens to
        cooldown_seconds: Cooldown for a newly created gate

    Returns:
        The client's shared ResilienceGate, attached to its error channel
    """
    with _gates_lock:
        gate = _gates.get(client)
        if gate is None:
            gate = ResilienceGate(cooldown_seconds=cooldown_seconds, name=client.backend_name)
            gate.attach(client)
            _gates[client] = gate
            logger.debug(
                "Created shared gate for %s client",
                client.backend_name,
                extra={"backend": client.backend_name, "cooldown_seconds": cooldown_seconds},
            )
        elif gate.cooldown_seconds != cooldown_seconds:
            logger.debug(
                "Reusing shared gate with cooldown %.1fs (requested %.1fs)",
                gate.cooldown_seconds,
                cooldown_seconds,
                extra={"backend": client.backend_name},
            )
        return gate
