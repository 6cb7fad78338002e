"""Client library for the Mosaic API with optimistic interaction sync."""

from .client import MosaicClient
from .errors import MosaicError, RejectedError, TransportError, UnauthenticatedError
from .sync import (
    OptimisticSync,
    SyncPhase,
    SyncResult,
    ToggleState,
    follow_toggle,
    like_toggle,
)

__all__ = [
    "MosaicClient",
    "MosaicError",
    "TransportError",
    "UnauthenticatedError",
    "RejectedError",
    "OptimisticSync",
    "SyncPhase",
    "SyncResult",
    "ToggleState",
    "like_toggle",
    "follow_toggle",
]
