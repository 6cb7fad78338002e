"""Message ledger endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.models import User
from app.schemas import Envelope, MessageCreate, MessageRead
from app.services import messages

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=Envelope[list[MessageRead]])
def read_messages(
    conversation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[list[MessageRead]]:
    """Return the conversation oldest first and mark inbound messages as read."""

    return Envelope(data=messages.list_and_mark_read(db, conversation_id, current_user.id))


@router.post("", response_model=Envelope[MessageRead], status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[MessageRead]:
    if payload.conversation_id is not None:
        message = messages.send(db, payload.conversation_id, current_user.id, payload.content)
    else:
        message = messages.send_direct(db, current_user.id, payload.recipient_id, payload.content)
    return Envelope(data=message)
