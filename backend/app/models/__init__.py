"""Database models package."""

from .base import Base
from .messaging import Conversation, Message
from .social import Comment, FollowEdge, Like, Post, SavedPost, User

__all__ = [
    "Base",
    "User",
    "FollowEdge",
    "Post",
    "Like",
    "Comment",
    "SavedPost",
    "Conversation",
    "Message",
]
