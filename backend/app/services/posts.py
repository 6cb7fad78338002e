"""Post publishing and the aggregated post views built on top of it."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.config import get_settings
from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.models import Post, User
from app.monitoring.metrics import record_action
from app.schemas import PostCard, PostDetail, PublicUser
from app.services import engagement

logger = logging.getLogger(__name__)
settings = get_settings()


def create_post(db: Session, owner_id: int, media_url: str, caption: str | None = None) -> PostCard:
    media = (media_url or "").strip()
    if not media:
        raise ValidationError("A media reference is required")
    if len(media) > settings.url_max_length:
        raise ValidationError(
            f"Media reference must be at most {settings.url_max_length} characters",
            details={"max_length": settings.url_max_length, "length": len(media)},
        )

    text = caption.strip() if caption else None
    if text and len(text) > settings.caption_max_length:
        raise ValidationError(
            f"Caption must be at most {settings.caption_max_length} characters",
            details={"max_length": settings.caption_max_length, "length": len(text)},
        )

    post = Post(owner_id=owner_id, media_url=media, caption=text or None)
    db.add(post)
    db.commit()
    db.refresh(post)
    record_action("post", "created")
    logger.info("User %s published post %s", owner_id, post.id)
    return post_card(db, post, owner_id)


def delete_post(db: Session, post_id: int, user_id: int) -> None:
    """Delete the post together with its likes, comments and bookmarks."""

    post = engagement.require_post(db, post_id)
    if post.owner_id != user_id:
        record_action("unpost", "rejected")
        raise ForbiddenError("You can only delete your own posts")

    db.delete(post)
    db.commit()
    record_action("unpost", "deleted")
    logger.info("User %s deleted post %s", user_id, post_id)


def post_card(db: Session, post: Post, viewer_id: int | None) -> PostCard:
    return PostCard(
        id=post.id,
        media_url=post.media_url,
        caption=post.caption,
        created_at=post.created_at,
        owner=PublicUser.model_validate(post.owner),
        like_count=engagement.like_count(db, post.id),
        comment_count=engagement.comment_count(db, post.id),
        is_liked=viewer_id is not None and engagement.is_liked(db, post.id, viewer_id),
        is_saved=viewer_id is not None and engagement.is_saved(db, post.id, viewer_id),
    )


def post_cards(db: Session, posts: Iterable[Post], viewer_id: int | None) -> list[PostCard]:
    return [post_card(db, post, viewer_id) for post in posts]


def post_detail(db: Session, post_id: int, viewer_id: int | None) -> PostDetail:
    post = engagement.require_post(db, post_id)
    card = post_card(db, post, viewer_id)
    return PostDetail(**card.model_dump(), comments=engagement.list_comments(db, post_id))


def list_posts(db: Session, viewer_id: int | None, limit: int | None = None) -> list[PostCard]:
    """Most recent posts across all users."""

    stmt = (
        select(Post)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .options(selectinload(Post.owner))
        .limit(settings.clamp_limit(limit))
    )
    return post_cards(db, db.execute(stmt).scalars(), viewer_id)


def list_user_posts(
    db: Session, user_id: int, viewer_id: int | None, limit: int | None = None
) -> list[PostCard]:
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found", details={"user_id": user_id})
    stmt = (
        select(Post)
        .where(Post.owner_id == user_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .options(selectinload(Post.owner))
        .limit(settings.clamp_limit(limit))
    )
    return post_cards(db, db.execute(stmt).scalars(), viewer_id)


def list_saved_posts(db: Session, user_id: int, limit: int | None = None) -> list[PostCard]:
    return post_cards(db, engagement.list_saved(db, user_id, limit), user_id)
