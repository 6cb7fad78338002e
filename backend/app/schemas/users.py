"""Schemas related to user profiles and the follow graph."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PublicUser(BaseModel):
    """Minimal public-facing user information."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    handle: str
    display_name: str | None = None
    avatar_url: str | None = None


class UserRead(PublicUser):
    """Full representation of the authenticated user."""

    bio: str | None = None
    created_at: datetime
    updated_at: datetime


class ProfileRead(UserRead):
    """Public profile with live relationship and content statistics."""

    posts_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    is_following: bool = Field(
        default=False, description="Whether the viewer follows this user"
    )
    is_self: bool = False


class ProfileUpdate(BaseModel):
    """Payload for editing the current user's profile."""

    handle: str | None = Field(default=None, description="New unique handle")
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = Field(
        default=None, description="Reference to an avatar already stored by the media service"
    )


class FollowRequest(BaseModel):
    """Payload for following or unfollowing a user."""

    following_id: int = Field(..., description="User to follow or unfollow")
    action: Literal["follow", "unfollow"] = "follow"


class FollowState(BaseModel):
    """Resulting edge state with the target's live follower count."""

    following_id: int
    following: bool
    followers_count: int = 0
