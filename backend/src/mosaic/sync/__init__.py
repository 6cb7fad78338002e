"""Optimistic client-side sync for idempotent toggles."""

from .actions import follow_key, follow_toggle, like_key, like_toggle
from .optimistic import OptimisticSync, SyncPhase, SyncResult, ToggleState

__all__ = [
    "OptimisticSync",
    "SyncPhase",
    "SyncResult",
    "ToggleState",
    "like_key",
    "follow_key",
    "like_toggle",
    "follow_toggle",
]
