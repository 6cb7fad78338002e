"""Append-only message ledger with one-way read state."""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from app.config import get_settings
from app.core.errors import ValidationError
from app.models import Conversation, Message
from app.models.social import utcnow
from app.monitoring.metrics import messages_marked_read_total, record_action
from app.schemas import MessageRead, PublicUser
from app.services import conversations

logger = logging.getLogger(__name__)
settings = get_settings()


def serialize_message(message: Message, viewer_id: int) -> MessageRead:
    return MessageRead(
        id=message.id,
        conversation_id=message.conversation_id,
        sender_id=message.sender_id,
        content=message.content,
        is_read=message.is_read,
        read_at=message.read_at,
        created_at=message.created_at,
        is_from_me=message.sender_id == viewer_id,
        sender=PublicUser.model_validate(message.sender),
    )


def _normalize_content(content: str) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationError("Message cannot be empty")
    if len(text) > settings.message_max_length:
        raise ValidationError(
            f"Message must be at most {settings.message_max_length} characters",
            details={"max_length": settings.message_max_length, "length": len(text)},
        )
    return text


def send(db: Session, conversation_id: int, sender_id: int, content: str) -> MessageRead:
    """Append a message and bump the conversation's last activity."""

    conversation = conversations.require_participant(db, conversation_id, sender_id)
    text = _normalize_content(content)

    now = utcnow()
    message = Message(
        conversation_id=conversation.id,
        sender_id=sender_id,
        content=text,
        is_read=False,
        created_at=now,
    )
    db.add(message)
    # last_activity only moves forward.
    db.execute(
        update(Conversation)
        .where(Conversation.id == conversation.id, Conversation.last_activity < now)
        .values(last_activity=now)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(message)
    record_action("message", "created")
    logger.info("User %s sent message %s in conversation %s", sender_id, message.id, conversation.id)
    return serialize_message(message, sender_id)


def send_direct(db: Session, sender_id: int, recipient_id: int, content: str) -> MessageRead:
    """Send to a user, opening the conversation on first contact."""

    _normalize_content(content)
    conversation, _ = conversations.get_or_create(db, sender_id, recipient_id)
    return send(db, conversation.id, sender_id, content)


def list_and_mark_read(
    db: Session, conversation_id: int, viewer_id: int, limit: int | None = None
) -> list[MessageRead]:
    """Return the conversation oldest first after marking inbound messages read.

    The read transition is a single UPDATE restricted to unread rows sent by
    the other participant, so it never flips a message back to unread and
    never touches the viewer's own messages.
    """

    conversation = conversations.require_participant(db, conversation_id, viewer_id)

    result = db.execute(
        update(Message)
        .where(
            Message.conversation_id == conversation.id,
            Message.sender_id != viewer_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True, read_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount:
        messages_marked_read_total.inc(amount=result.rowcount)
        logger.debug(
            "Marked %s messages read in conversation %s for user %s",
            result.rowcount,
            conversation.id,
            viewer_id,
        )

    stmt = (
        select(Message)
        .where(Message.conversation_id == conversation.id)
        .order_by(Message.id.asc())
        .options(selectinload(Message.sender))
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return [serialize_message(message, viewer_id) for message in db.execute(stmt).scalars()]


def unread_count(db: Session, conversation_id: int, viewer_id: int) -> int:
    conversations.require_participant(db, conversation_id, viewer_id)
    return conversations.unread_for(db, conversation_id, viewer_id)
