"""Follow graph mutations."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.models import User
from app.schemas import Envelope, FollowRequest, FollowState
from app.services import graph

router = APIRouter(prefix="/follows", tags=["follows"])


@router.post("", response_model=Envelope[FollowState])
def change_follow(
    payload: FollowRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[FollowState]:
    """Follow or unfollow a user. Repeating the same action is a no-op."""

    if payload.action == "unfollow":
        state = graph.unfollow(db, current_user.id, payload.following_id)
    else:
        state = graph.follow(db, current_user.id, payload.following_id)
    return Envelope(data=state)
