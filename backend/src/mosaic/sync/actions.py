"""Like and follow toggles bound to :class:`MosaicClient`."""

from __future__ import annotations

from ..client import MosaicClient
from .optimistic import OptimisticSync, SyncResult


def like_key(actor_id: int, post_id: int) -> tuple[str, int, int]:
    return ("like", actor_id, post_id)


def follow_key(actor_id: int, user_id: int) -> tuple[str, int, int]:
    return ("follow", actor_id, user_id)


async def like_toggle(
    sync: OptimisticSync, client: MosaicClient, actor_id: int, post_id: int
) -> SyncResult | None:
    """Toggle the actor's like on a post; the counter is the post's like count."""

    async def operation(on: bool) -> None:
        if on:
            await client.like(post_id)
        else:
            await client.unlike(post_id)

    return await sync.toggle(like_key(actor_id, post_id), operation)


async def follow_toggle(
    sync: OptimisticSync, client: MosaicClient, actor_id: int, user_id: int
) -> SyncResult | None:
    """Toggle following ``user_id``; the counter is their follower count."""

    async def operation(on: bool) -> None:
        if on:
            await client.follow(user_id)
        else:
            await client.unfollow(user_id)

    return await sync.toggle(follow_key(actor_id, user_id), operation)
