"""Comment creation and removal."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.models import User
from app.schemas import CommentCreate, CommentRead, DeletedResult, Envelope
from app.services import engagement

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=Envelope[CommentRead], status_code=status.HTTP_201_CREATED)
def add_comment(
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[CommentRead]:
    comment = engagement.add_comment(db, payload.post_id, current_user.id, payload.content)
    return Envelope(data=comment)


@router.delete("/{comment_id}", response_model=Envelope[DeletedResult])
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[DeletedResult]:
    """Remove a comment. Only its author may do so."""

    engagement.delete_comment(db, comment_id, current_user.id)
    return Envelope(data=DeletedResult(id=comment_id))
