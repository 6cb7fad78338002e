"""Direct conversation endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.models import User
from app.schemas import ConversationCreate, ConversationHandle, ConversationSummary, Envelope
from app.services import conversations

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("", response_model=Envelope[ConversationHandle])
def open_conversation(
    payload: ConversationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[ConversationHandle]:
    """Return the conversation with another user, creating it if needed."""

    conversation, is_new = conversations.get_or_create(db, current_user.id, payload.other_user_id)
    return Envelope(data=ConversationHandle(conversation_id=conversation.id, is_new=is_new))


@router.get("", response_model=Envelope[list[ConversationSummary]])
def list_conversations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[list[ConversationSummary]]:
    return Envelope(data=conversations.list_for_user(db, current_user.id))
