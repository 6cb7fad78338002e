"""User profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_list_limit
from app.database import get_db
from app.models import User
from app.schemas import Envelope, PostCard, ProfileRead, ProfileUpdate, PublicUser, UserRead
from app.services import graph, posts, profiles

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=Envelope[UserRead])
def read_current_user(current_user: User = Depends(get_current_user)) -> Envelope[UserRead]:
    return Envelope(data=UserRead.model_validate(current_user))


@router.patch("/me", response_model=Envelope[UserRead])
def update_current_user(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[UserRead]:
    """Edit handle, display name, bio or avatar reference."""

    user = profiles.update_profile(db, current_user, payload)
    return Envelope(data=UserRead.model_validate(user))


@router.get("/search", response_model=Envelope[list[PublicUser]])
def search_users(
    q: str = "",
    limit: int = Depends(get_list_limit),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[list[PublicUser]]:
    """Find other users whose handle or display name contains ``q``."""

    return Envelope(data=profiles.search_users(db, q, current_user.id, limit))


@router.get("/{user_id}", response_model=Envelope[ProfileRead])
def read_profile(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[ProfileRead]:
    return Envelope(data=profiles.profile(db, user_id, current_user.id))


@router.get("/{user_id}/followers", response_model=Envelope[list[PublicUser]])
def read_followers(
    user_id: int,
    limit: int = Depends(get_list_limit),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[list[PublicUser]]:
    return Envelope(data=graph.list_followers(db, user_id, limit))


@router.get("/{user_id}/following", response_model=Envelope[list[PublicUser]])
def read_following(
    user_id: int,
    limit: int = Depends(get_list_limit),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[list[PublicUser]]:
    return Envelope(data=graph.list_following(db, user_id, limit))


@router.get("/{user_id}/posts", response_model=Envelope[list[PostCard]])
def read_user_posts(
    user_id: int,
    limit: int = Depends(get_list_limit),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[list[PostCard]]:
    return Envelope(data=posts.list_user_posts(db, user_id, current_user.id, limit))
