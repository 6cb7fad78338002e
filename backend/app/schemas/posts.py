"""Schemas for posts and their engagement."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.users import PublicUser


class PostCreate(BaseModel):
    """Payload for publishing a post."""

    media_url: str = Field(..., description="Reference to media already stored by the media service")
    caption: str | None = None


class PostRef(BaseModel):
    """Body used by like and bookmark toggles."""

    post_id: int


class CommentCreate(BaseModel):
    """Payload for commenting on a post."""

    post_id: int
    content: str


class CommentRead(BaseModel):
    """Comment joined with its author's public fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    content: str
    created_at: datetime
    author: PublicUser


class PostCard(BaseModel):
    """Post with live engagement aggregates for a given viewer."""

    id: int
    media_url: str
    caption: str | None = None
    created_at: datetime
    owner: PublicUser
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = False
    is_saved: bool = False


class PostDetail(PostCard):
    comments: list[CommentRead] = Field(default_factory=list)


class LikeState(BaseModel):
    post_id: int
    liked: bool
    like_count: int = Field(0, ge=0)


class SaveState(BaseModel):
    post_id: int
    saved: bool
