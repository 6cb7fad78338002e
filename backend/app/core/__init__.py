"""Core utilities for the Mosaic backend."""

from .errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    SocialError,
    TransportError,
    UnauthenticatedError,
    ValidationError,
)

__all__ = [
    "SocialError",
    "ValidationError",
    "UnauthenticatedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "TransportError",
]
