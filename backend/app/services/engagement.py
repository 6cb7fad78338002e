"""Likes, comments and bookmarks on posts.

Every count here is computed on read; nothing is denormalized onto the post
row. Toggles are idempotent: switching a like on twice leaves a single row and
switching it off when absent is a no-op.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.config import get_settings
from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.models import Comment, Like, Post, SavedPost
from app.monitoring.metrics import record_action
from app.schemas import CommentRead, LikeState, SaveState

logger = logging.getLogger(__name__)
settings = get_settings()


def require_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found", details={"post_id": post_id})
    return post


def like_count(db: Session, post_id: int) -> int:
    stmt = select(func.count()).select_from(Like).where(Like.post_id == post_id)
    return db.execute(stmt).scalar_one()


def is_liked(db: Session, post_id: int, user_id: int) -> bool:
    stmt = select(Like.id).where(Like.post_id == post_id, Like.user_id == user_id)
    return db.execute(stmt).first() is not None


def comment_count(db: Session, post_id: int) -> int:
    stmt = select(func.count()).select_from(Comment).where(Comment.post_id == post_id)
    return db.execute(stmt).scalar_one()


def is_saved(db: Session, post_id: int, user_id: int) -> bool:
    stmt = select(SavedPost.id).where(SavedPost.post_id == post_id, SavedPost.user_id == user_id)
    return db.execute(stmt).first() is not None


def _insert_once(db: Session, row: Like | SavedPost, action: str) -> None:
    """Insert a pair row, treating a uniqueness violation as already done."""

    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        exists = is_liked if isinstance(row, Like) else is_saved
        if not exists(db, row.post_id, row.user_id):
            raise ConflictError(f"Could not record {action}") from None
        record_action(action, "noop")
        logger.debug("%s by user %s on post %s already present", action, row.user_id, row.post_id)
    else:
        record_action(action, "created")


def toggle_like(db: Session, post_id: int, user_id: int, on: bool) -> LikeState:
    """Set the like state of ``user_id`` on ``post_id``."""

    require_post(db, post_id)
    if on:
        _insert_once(db, Like(post_id=post_id, user_id=user_id), "like")
    else:
        result = db.execute(delete(Like).where(Like.post_id == post_id, Like.user_id == user_id))
        db.commit()
        record_action("unlike", "deleted" if result.rowcount else "noop")

    return LikeState(post_id=post_id, liked=on, like_count=like_count(db, post_id))


def toggle_save(db: Session, post_id: int, user_id: int, on: bool) -> SaveState:
    """Set the bookmark state of ``user_id`` on ``post_id``."""

    require_post(db, post_id)
    if on:
        _insert_once(db, SavedPost(post_id=post_id, user_id=user_id), "save")
    else:
        result = db.execute(
            delete(SavedPost).where(SavedPost.post_id == post_id, SavedPost.user_id == user_id)
        )
        db.commit()
        record_action("unsave", "deleted" if result.rowcount else "noop")

    return SaveState(post_id=post_id, saved=on)


def list_saved(db: Session, user_id: int, limit: int | None = None) -> list[Post]:
    """Posts bookmarked by ``user_id``, most recently saved first."""

    stmt = (
        select(Post)
        .join(SavedPost, SavedPost.post_id == Post.id)
        .where(SavedPost.user_id == user_id)
        .order_by(SavedPost.created_at.desc(), SavedPost.id.desc())
        .options(selectinload(Post.owner))
        .limit(settings.clamp_limit(limit))
    )
    return list(db.execute(stmt).scalars())


def _normalize_comment(content: str) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationError("Comment cannot be empty")
    if len(text) > settings.comment_max_length:
        raise ValidationError(
            f"Comment must be at most {settings.comment_max_length} characters",
            details={"max_length": settings.comment_max_length, "length": len(text)},
        )
    return text


def add_comment(db: Session, post_id: int, user_id: int, content: str) -> CommentRead:
    text = _normalize_comment(content)
    require_post(db, post_id)

    comment = Comment(post_id=post_id, user_id=user_id, content=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    record_action("comment", "created")
    logger.info("User %s commented %s on post %s", user_id, comment.id, post_id)
    return CommentRead.model_validate(comment)


def delete_comment(db: Session, comment_id: int, user_id: int) -> None:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found", details={"comment_id": comment_id})
    if comment.user_id != user_id:
        record_action("uncomment", "rejected")
        raise ForbiddenError("You can only delete your own comments")

    db.delete(comment)
    db.commit()
    record_action("uncomment", "deleted")
    logger.info("User %s deleted comment %s", user_id, comment_id)


def list_comments(db: Session, post_id: int, limit: int | None = None) -> list[CommentRead]:
    """Comments on the post, newest first."""

    require_post(db, post_id)
    stmt = (
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .options(selectinload(Comment.author))
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return [CommentRead.model_validate(comment) for comment in db.execute(stmt).scalars()]
