"""Public profiles and profile edits."""

from __future__ import annotations

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.errors import NotFoundError, ValidationError
from app.models import Post, User
from app.schemas import ProfileRead, ProfileUpdate, PublicUser, UserRead
from app.services import graph

logger = logging.getLogger(__name__)
settings = get_settings()


def _posts_count(db: Session, user_id: int) -> int:
    stmt = select(func.count()).select_from(Post).where(Post.owner_id == user_id)
    return db.execute(stmt).scalar_one()


def profile(db: Session, user_id: int, viewer_id: int | None) -> ProfileRead:
    """Return the user's public fields with live statistics."""

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", details={"user_id": user_id})

    followers, following = graph.counts(db, user_id)
    base = UserRead.model_validate(user)
    return ProfileRead(
        **base.model_dump(),
        posts_count=_posts_count(db, user_id),
        followers_count=followers,
        following_count=following,
        is_following=viewer_id is not None
        and viewer_id != user_id
        and graph.is_following(db, viewer_id, user_id),
        is_self=viewer_id == user_id,
    )


def _normalize_handle(raw: str) -> str:
    handle = raw.strip()
    if not handle:
        raise ValidationError("Handle cannot be empty")
    if len(handle) > settings.handle_max_length:
        raise ValidationError(
            f"Handle must be at most {settings.handle_max_length} characters",
            details={"max_length": settings.handle_max_length},
        )
    return handle


def _bounded(label: str, raw: str | None, max_length: int) -> str | None:
    value = (raw or "").strip()
    if len(value) > max_length:
        raise ValidationError(
            f"{label} must be at most {max_length} characters",
            details={"max_length": max_length, "length": len(value)},
        )
    return value or None


def update_profile(db: Session, user: User, payload: ProfileUpdate) -> User:
    """Apply the provided fields to ``user``. Omitted fields are unchanged."""

    updates = payload.model_dump(exclude_unset=True)
    changes: dict[str, str | None] = {}

    if updates.get("handle") is not None:
        handle = _normalize_handle(updates["handle"])
        if handle != user.handle:
            taken = db.execute(
                select(User.id).where(User.handle == handle, User.id != user.id)
            ).first()
            if taken is not None:
                raise ValidationError("Handle is already taken", details={"handle": handle})
            changes["handle"] = handle

    if "bio" in updates:
        changes["bio"] = _bounded("Bio", updates["bio"], settings.bio_max_length)

    if "display_name" in updates:
        changes["display_name"] = _bounded(
            "Display name", updates["display_name"], settings.display_name_max_length
        )

    if "avatar_url" in updates:
        changes["avatar_url"] = _bounded("Avatar URL", updates["avatar_url"], settings.url_max_length)

    for field, value in changes.items():
        setattr(user, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError(
            "Handle is already taken", details={"handle": changes.get("handle")}
        ) from None
    db.refresh(user)
    logger.info("User %s updated profile fields %s", user.id, sorted(changes))
    return user


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_users(
    db: Session, query: str | None, viewer_id: int | None, limit: int | None = None
) -> list[PublicUser]:
    """Case-insensitive substring match on handle or display name.

    The caller is never part of the results and a blank query matches nobody.
    """

    term = (query or "").strip()
    if not term:
        return []

    pattern = _like_pattern(term)
    stmt = (
        select(User)
        .where(
            or_(
                User.handle.ilike(pattern, escape="\\"),
                User.display_name.ilike(pattern, escape="\\"),
            )
        )
        .order_by(User.handle.asc(), User.id.asc())
        .limit(settings.clamp_limit(limit))
    )
    if viewer_id is not None:
        stmt = stmt.where(User.id != viewer_id)
    return [PublicUser.model_validate(user) for user in db.execute(stmt).scalars()]
