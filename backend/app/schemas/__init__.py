"""Pydantic schemas for API payloads."""

from .common import DeletedResult, Envelope
from .conversations import (
    ConversationCreate,
    ConversationHandle,
    ConversationSummary,
    LastMessage,
    MessageCreate,
    MessageRead,
)
from .posts import (
    CommentCreate,
    CommentRead,
    LikeState,
    PostCard,
    PostCreate,
    PostDetail,
    PostRef,
    SaveState,
)
from .users import (
    FollowRequest,
    FollowState,
    ProfileRead,
    ProfileUpdate,
    PublicUser,
    UserRead,
)

__all__ = [
    "Envelope",
    "DeletedResult",
    "PublicUser",
    "UserRead",
    "ProfileRead",
    "ProfileUpdate",
    "FollowRequest",
    "FollowState",
    "PostCreate",
    "PostRef",
    "PostCard",
    "PostDetail",
    "CommentCreate",
    "CommentRead",
    "LikeState",
    "SaveState",
    "ConversationCreate",
    "ConversationHandle",
    "ConversationSummary",
    "LastMessage",
    "MessageCreate",
    "MessageRead",
]
