"""Bookmarks."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_list_limit
from app.database import get_db
from app.models import User
from app.schemas import Envelope, PostCard, PostRef, SaveState
from app.services import engagement, posts

router = APIRouter(prefix="/saved-posts", tags=["saved-posts"])


@router.post("", response_model=Envelope[SaveState])
def save_post(
    payload: PostRef,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[SaveState]:
    return Envelope(data=engagement.toggle_save(db, payload.post_id, current_user.id, True))


@router.delete("", response_model=Envelope[SaveState])
def unsave_post(
    payload: PostRef,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[SaveState]:
    return Envelope(data=engagement.toggle_save(db, payload.post_id, current_user.id, False))


@router.get("", response_model=Envelope[list[PostCard]])
def list_saved_posts(
    limit: int = Depends(get_list_limit),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[list[PostCard]]:
    """Posts bookmarked by the caller, most recently saved first."""

    return Envelope(data=posts.list_saved_posts(db, current_user.id, limit))
