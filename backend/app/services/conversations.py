"""Pairwise conversation registry.

A conversation is identified by the unordered pair of its participants. The
pair is stored as ``(min, max)`` and protected by a unique constraint, so two
clients opening the same conversation at the same moment converge on one row:
the loser of the insert race rolls back and reads the winner's row.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.models import Conversation, Message, User
from app.monitoring.metrics import conversation_race_recoveries_total, record_action
from app.schemas import ConversationSummary, LastMessage, PublicUser

logger = logging.getLogger(__name__)


def normalize_pair(user_id: int, other_id: int) -> tuple[int, int]:
    return (user_id, other_id) if user_id < other_id else (other_id, user_id)


def find_conversation(db: Session, user_low_id: int, user_high_id: int) -> Conversation | None:
    stmt = select(Conversation).where(
        Conversation.user_low_id == user_low_id,
        Conversation.user_high_id == user_high_id,
    )
    return db.execute(stmt).scalar_one_or_none()


def get_or_create(db: Session, user_id: int, other_id: int) -> tuple[Conversation, bool]:
    """Return the conversation between two users and whether it was just created."""

    if user_id == other_id:
        raise ValidationError("Cannot start a conversation with yourself")
    if db.get(User, other_id) is None:
        raise NotFoundError("User not found", details={"user_id": other_id})

    low, high = normalize_pair(user_id, other_id)
    conversation = find_conversation(db, low, high)
    if conversation is not None:
        return conversation, False

    conversation = Conversation(user_low_id=low, user_high_id=high)
    db.add(conversation)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        winner = find_conversation(db, low, high)
        if winner is None:
            raise ConflictError("Could not create conversation") from None
        conversation_race_recoveries_total.inc()
        logger.warning(
            "Conversation insert for pair (%s, %s) lost a race; reusing conversation %s",
            low,
            high,
            winner.id,
        )
        return winner, False

    db.refresh(conversation)
    record_action("conversation", "created")
    logger.info("Created conversation %s for pair (%s, %s)", conversation.id, low, high)
    return conversation, True


def require_participant(db: Session, conversation_id: int, user_id: int) -> Conversation:
    """Load the conversation, rejecting callers who are not one of its two users."""

    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found", details={"conversation_id": conversation_id})
    if not conversation.has_user(user_id):
        raise ForbiddenError("You are not a participant in this conversation")
    return conversation


def _last_message(db: Session, conversation_id: int) -> Message | None:
    stmt = (
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalar_one_or_none()


def unread_for(db: Session, conversation_id: int, viewer_id: int) -> int:
    """Count inbound unread messages for ``viewer_id`` without changing them."""

    stmt = (
        select(func.count())
        .select_from(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.sender_id != viewer_id,
            Message.is_read.is_(False),
        )
    )
    return db.execute(stmt).scalar_one()


def list_for_user(db: Session, user_id: int) -> list[ConversationSummary]:
    """Conversations of ``user_id``, most recently active first."""

    stmt = (
        select(Conversation)
        .where(or_(Conversation.user_low_id == user_id, Conversation.user_high_id == user_id))
        .order_by(Conversation.last_activity.desc(), Conversation.id.desc())
        .options(selectinload(Conversation.user_low), selectinload(Conversation.user_high))
    )
    summaries: list[ConversationSummary] = []
    for conversation in db.execute(stmt).scalars():
        last = _last_message(db, conversation.id)
        summaries.append(
            ConversationSummary(
                id=conversation.id,
                other_user=PublicUser.model_validate(conversation.other_user(user_id)),
                last_message=(
                    LastMessage(
                        id=last.id,
                        content=last.content,
                        sender_id=last.sender_id,
                        created_at=last.created_at,
                        is_from_me=last.sender_id == user_id,
                    )
                    if last is not None
                    else None
                ),
                unread_count=unread_for(db, conversation.id, user_id),
                last_activity=conversation.last_activity,
                created_at=conversation.created_at,
            )
        )
    return summaries
