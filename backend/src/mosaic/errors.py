"""Errors raised by the client library."""

from __future__ import annotations

from typing import Any


class MosaicError(Exception):
    """Base class for client side failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(MosaicError):
    """The request did not complete: network failure, timeout or a 5xx reply."""


class UnauthenticatedError(MosaicError):
    """The server rejected the identity token (HTTP 401)."""


class RejectedError(MosaicError):
    """The server refused the operation with a 4xx status."""

    def __init__(self, status_code: int, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"
