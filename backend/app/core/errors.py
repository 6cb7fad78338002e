"""Domain error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations

from typing import Any

from fastapi import status


class SocialError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(SocialError):
    """Malformed or out-of-range input. Never retried automatically."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(SocialError):
    """No valid identity; callers should send the user to sign-in."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(SocialError):
    """The actor lacks authority over the target resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(SocialError):
    """A referenced user, post, comment or conversation does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(SocialError):
    """A concurrent writer won a uniqueness race."""

    status_code = status.HTTP_409_CONFLICT


class TransportError(SocialError):
    """The storage backend is unavailable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def error_body(message: str, details: Any = None) -> dict[str, Any]:
    """Build the standard error envelope."""

    return {"error": message, "details": details}
