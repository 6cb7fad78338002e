"""Like toggles."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.models import User
from app.schemas import Envelope, LikeState, PostRef
from app.services import engagement

router = APIRouter(prefix="/likes", tags=["likes"])


@router.post("", response_model=Envelope[LikeState])
def like_post(
    payload: PostRef,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[LikeState]:
    return Envelope(data=engagement.toggle_like(db, payload.post_id, current_user.id, True))


@router.delete("", response_model=Envelope[LikeState])
def unlike_post(
    payload: PostRef,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[LikeState]:
    return Envelope(data=engagement.toggle_like(db, payload.post_id, current_user.id, False))
