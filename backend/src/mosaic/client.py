"""Async HTTP client for the Mosaic API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import RejectedError, TransportError, UnauthenticatedError

logger = logging.getLogger(__name__)


class MosaicClient:
    """Thin wrapper over :class:`httpx.AsyncClient` that unwraps API envelopes.

    Successful calls return the ``data`` member of the response envelope.
    Failures are mapped onto the client error taxonomy: network problems,
    timeouts and 5xx replies raise :class:`TransportError`, 401 raises
    :class:`UnauthenticatedError` and any other 4xx raises
    :class:`RejectedError`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "MosaicClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _get_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=self._get_headers()
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if response.is_success:
            return response.json().get("data")

        message, details = self._error_payload(response)
        logger.debug("%s %s returned %s: %s", method, path, response.status_code, message)
        if response.status_code == 401:
            raise UnauthenticatedError(message)
        if response.status_code >= 500:
            raise TransportError(message)
        raise RejectedError(response.status_code, message, details)

    @staticmethod
    def _error_payload(response: httpx.Response) -> tuple[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return response.reason_phrase or f"HTTP {response.status_code}", None
        if isinstance(body, dict) and "error" in body:
            return str(body["error"]), body.get("details")
        return response.reason_phrase or f"HTTP {response.status_code}", body

    async def sync_identity(self) -> dict[str, Any]:
        return await self._request("POST", "/api/identity/sync")

    async def me(self) -> dict[str, Any]:
        return await self._request("GET", "/api/users/me")

    async def profile(self, user_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/api/users/{user_id}")

    async def follow(self, user_id: int) -> dict[str, Any]:
        return await self._request(
            "POST", "/api/follows", json={"following_id": user_id, "action": "follow"}
        )

    async def unfollow(self, user_id: int) -> dict[str, Any]:
        return await self._request(
            "POST", "/api/follows", json={"following_id": user_id, "action": "unfollow"}
        )

    async def create_post(self, media_url: str, caption: str | None = None) -> dict[str, Any]:
        return await self._request(
            "POST", "/api/posts", json={"media_url": media_url, "caption": caption}
        )

    async def post(self, post_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/api/posts/{post_id}")

    async def like(self, post_id: int) -> dict[str, Any]:
        return await self._request("POST", "/api/likes", json={"post_id": post_id})

    async def unlike(self, post_id: int) -> dict[str, Any]:
        return await self._request("DELETE", "/api/likes", json={"post_id": post_id})

    async def save(self, post_id: int) -> dict[str, Any]:
        return await self._request("POST", "/api/saved-posts", json={"post_id": post_id})

    async def unsave(self, post_id: int) -> dict[str, Any]:
        return await self._request("DELETE", "/api/saved-posts", json={"post_id": post_id})

    async def comment(self, post_id: int, content: str) -> dict[str, Any]:
        return await self._request(
            "POST", "/api/comments", json={"post_id": post_id, "content": content}
        )

    async def open_conversation(self, other_user_id: int) -> dict[str, Any]:
        return await self._request(
            "POST", "/api/conversations", json={"other_user_id": other_user_id}
        )

    async def conversations(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/api/conversations")

    async def send_message(
        self,
        content: str,
        *,
        conversation_id: int | None = None,
        recipient_id: int | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": content}
        if conversation_id is not None:
            payload["conversation_id"] = conversation_id
        if recipient_id is not None:
            payload["recipient_id"] = recipient_id
        return await self._request("POST", "/api/messages", json=payload)

    async def messages(self, conversation_id: int) -> list[dict[str, Any]]:
        return await self._request(
            "GET", "/api/messages", params={"conversation_id": conversation_id}
        )
