"""Schemas for direct conversations and messages."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from app.schemas.users import PublicUser


class ConversationCreate(BaseModel):
    """Payload for opening a conversation with another user."""

    other_user_id: int


class ConversationHandle(BaseModel):
    conversation_id: int
    is_new: bool


class LastMessage(BaseModel):
    """Most recent message shown in the conversation list."""

    id: int
    content: str
    sender_id: int
    created_at: datetime
    is_from_me: bool


class ConversationSummary(BaseModel):
    """Conversation annotated for one participant."""

    id: int
    other_user: PublicUser
    last_message: LastMessage | None = None
    unread_count: int = Field(0, ge=0)
    last_activity: datetime
    created_at: datetime


class MessageRead(BaseModel):
    """Representation of a message relative to the viewer."""

    id: int
    conversation_id: int
    sender_id: int
    content: str
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime
    is_from_me: bool
    sender: PublicUser


class MessageCreate(BaseModel):
    """Payload for sending a message into a conversation or directly to a user."""

    conversation_id: int | None = Field(default=None, description="Existing conversation")
    recipient_id: int | None = Field(
        default=None,
        description="Recipient user; the conversation is created on first contact",
    )
    content: str

    @model_validator(mode="after")
    def ensure_single_target(self) -> "MessageCreate":
        if (self.conversation_id is None) == (self.recipient_id is None):
            raise ValueError("Exactly one of conversation_id or recipient_id must be provided")
        return self
