"""Directed follow graph between users."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models import FollowEdge, User
from app.monitoring.metrics import record_action
from app.schemas import FollowState, PublicUser

logger = logging.getLogger(__name__)


def _require_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", details={"user_id": user_id})
    return user


def is_following(db: Session, follower_id: int, following_id: int) -> bool:
    stmt = select(FollowEdge.id).where(
        FollowEdge.follower_id == follower_id,
        FollowEdge.following_id == following_id,
    )
    return db.execute(stmt).first() is not None


def followers_count(db: Session, user_id: int) -> int:
    stmt = select(func.count()).select_from(FollowEdge).where(FollowEdge.following_id == user_id)
    return db.execute(stmt).scalar_one()


def following_count(db: Session, user_id: int) -> int:
    stmt = select(func.count()).select_from(FollowEdge).where(FollowEdge.follower_id == user_id)
    return db.execute(stmt).scalar_one()


def counts(db: Session, user_id: int) -> tuple[int, int]:
    """Return ``(followers, following)`` for the user, computed live."""

    return followers_count(db, user_id), following_count(db, user_id)


def follow(db: Session, follower_id: int, following_id: int) -> FollowState:
    """Create the edge ``follower -> following``; an existing edge is success."""

    if follower_id == following_id:
        record_action("follow", "rejected")
        raise ValidationError("You cannot follow yourself")
    _require_user(db, following_id)

    db.add(FollowEdge(follower_id=follower_id, following_id=following_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not is_following(db, follower_id, following_id):
            raise ConflictError("Could not record follow") from None
        record_action("follow", "noop")
        logger.debug("User %s already follows %s", follower_id, following_id)
    else:
        record_action("follow", "created")
        logger.info("User %s followed %s", follower_id, following_id)

    return FollowState(
        following_id=following_id,
        following=True,
        followers_count=followers_count(db, following_id),
    )


def unfollow(db: Session, follower_id: int, following_id: int) -> FollowState:
    """Remove the edge if present. A missing edge is not an error."""

    if follower_id == following_id:
        record_action("unfollow", "rejected")
        raise ValidationError("You cannot unfollow yourself")

    result = db.execute(
        delete(FollowEdge).where(
            FollowEdge.follower_id == follower_id,
            FollowEdge.following_id == following_id,
        )
    )
    db.commit()
    if result.rowcount:
        record_action("unfollow", "deleted")
        logger.info("User %s unfollowed %s", follower_id, following_id)
    else:
        record_action("unfollow", "noop")

    return FollowState(
        following_id=following_id,
        following=False,
        followers_count=followers_count(db, following_id),
    )


def list_followers(db: Session, user_id: int, limit: int | None = None) -> list[PublicUser]:
    """Users following ``user_id``, most recent edge first."""

    _require_user(db, user_id)
    stmt = (
        select(User)
        .join(FollowEdge, FollowEdge.follower_id == User.id)
        .where(FollowEdge.following_id == user_id)
        .order_by(FollowEdge.created_at.desc(), FollowEdge.id.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return [PublicUser.model_validate(user) for user in db.execute(stmt).scalars()]


def list_following(db: Session, user_id: int, limit: int | None = None) -> list[PublicUser]:
    """Users that ``user_id`` follows, most recent edge first."""

    _require_user(db, user_id)
    stmt = (
        select(User)
        .join(FollowEdge, FollowEdge.following_id == User.id)
        .where(FollowEdge.follower_id == user_id)
        .order_by(FollowEdge.created_at.desc(), FollowEdge.id.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return [PublicUser.model_validate(user) for user in db.execute(stmt).scalars()]
