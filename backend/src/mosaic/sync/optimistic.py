"""Optimistic toggle state machine.

Each key (action, actor, subject) moves through
``IDLE -> PENDING -> COMMITTED | ROLLED_BACK``. The displayed state flips
before the server round trip and is restored if the round trip fails.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Hashable

from ..errors import TransportError, UnauthenticatedError

logger = logging.getLogger(__name__)

SyncKey = Hashable
ToggleOperation = Callable[[bool], Awaitable[Any]]
ReauthHook = Callable[[UnauthenticatedError], Any]
StateListener = Callable[[SyncKey, "ToggleState"], None]


class SyncPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True, slots=True)
class ToggleState:
    """What the user sees: whether the toggle is on, and its counter."""

    active: bool
    count: int = 0

    def flipped(self) -> "ToggleState":
        active = not self.active
        count = self.count + 1 if active else max(0, self.count - 1)
        return ToggleState(active=active, count=count)


@dataclass(frozen=True, slots=True)
class SyncResult:
    phase: SyncPhase
    state: ToggleState
    error: Exception | None = None


class OptimisticSync:
    """Tracks displayed toggle state per key and reconciles it with the server.

    A toggle for a key that is already pending is dropped, not queued.
    Failures restore the state displayed before the toggle. Authentication
    failures are routed to ``on_unauthenticated`` when one is configured;
    every other failure is re-raised after the rollback.
    """

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        on_unauthenticated: ReauthHook | None = None,
        listener: StateListener | None = None,
    ) -> None:
        self.timeout = timeout
        self.on_unauthenticated = on_unauthenticated
        self.listener = listener
        self._states: dict[SyncKey, ToggleState] = {}
        self._phases: dict[SyncKey, SyncPhase] = {}

    def seed(self, key: SyncKey, state: ToggleState) -> None:
        """Record server-provided state for a key that is not in flight."""

        if self.phase(key) is SyncPhase.PENDING:
            return
        self._states[key] = state

    def state(self, key: SyncKey) -> ToggleState:
        return self._states.get(key, ToggleState(active=False, count=0))

    def phase(self, key: SyncKey) -> SyncPhase:
        return self._phases.get(key, SyncPhase.IDLE)

    def is_pending(self, key: SyncKey) -> bool:
        return self.phase(key) is SyncPhase.PENDING

    def _display(self, key: SyncKey, state: ToggleState) -> None:
        self._states[key] = state
        if self.listener is not None:
            self.listener(key, state)

    async def toggle(self, key: SyncKey, operation: ToggleOperation) -> SyncResult | None:
        """Flip the toggle for ``key`` and confirm it with ``operation``.

        ``operation`` receives the intended state (``True`` to switch on) and
        must be idempotent on the server. Returns ``None`` when the call was
        dropped because the key is already pending.
        """

        if self.is_pending(key):
            logger.debug("Dropping toggle for %r while a request is in flight", key)
            return None

        previous = self.state(key)
        optimistic = previous.flipped()
        self._phases[key] = SyncPhase.PENDING
        self._display(key, optimistic)

        try:
            await asyncio.wait_for(operation(optimistic.active), timeout=self.timeout)
        except asyncio.TimeoutError:
            error = TransportError(f"Timed out after {self.timeout}s")
            self._rollback(key, previous, error)
            raise error from None
        except UnauthenticatedError as exc:
            self._rollback(key, previous, exc)
            if self.on_unauthenticated is None:
                raise
            outcome = self.on_unauthenticated(exc)
            if inspect.isawaitable(outcome):
                await outcome
            return SyncResult(SyncPhase.ROLLED_BACK, previous, exc)
        except (Exception, asyncio.CancelledError) as exc:
            self._rollback(key, previous, exc)
            raise

        self._phases[key] = SyncPhase.COMMITTED
        return SyncResult(SyncPhase.COMMITTED, optimistic)

    def _rollback(self, key: SyncKey, previous: ToggleState, error: BaseException) -> None:
        logger.info("Rolling back toggle for %r: %s", key, error)
        self._phases[key] = SyncPhase.ROLLED_BACK
        self._display(key, previous)
