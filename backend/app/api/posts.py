"""Post publishing and reading endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_list_limit
from app.database import get_db
from app.models import User
from app.schemas import CommentRead, DeletedResult, Envelope, PostCard, PostCreate, PostDetail
from app.services import engagement, posts

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=Envelope[PostCard], status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[PostCard]:
    return Envelope(data=posts.create_post(db, current_user.id, payload.media_url, payload.caption))


@router.get("", response_model=Envelope[list[PostCard]])
def list_posts(
    limit: int = Depends(get_list_limit),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[list[PostCard]]:
    """Most recent posts with engagement relative to the caller."""

    return Envelope(data=posts.list_posts(db, current_user.id, limit))


@router.get("/{post_id}", response_model=Envelope[PostDetail])
def read_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[PostDetail]:
    return Envelope(data=posts.post_detail(db, post_id, current_user.id))


@router.delete("/{post_id}", response_model=Envelope[DeletedResult])
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[DeletedResult]:
    posts.delete_post(db, post_id, current_user.id)
    return Envelope(data=DeletedResult(id=post_id))


@router.get("/{post_id}/comments", response_model=Envelope[list[CommentRead]])
def list_post_comments(
    post_id: int,
    limit: int = Depends(get_list_limit),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[list[CommentRead]]:
    """Comments on a post, newest first."""

    return Envelope(data=engagement.list_comments(db, post_id, limit))
