"""Identity synchronization with the external provider."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_identity
from app.core.security import ExternalIdentity
from app.database import get_db
from app.schemas import Envelope, UserRead
from app.services.identity import sync_identity

router = APIRouter(prefix="/identity", tags=["identity"])


@router.post("/sync", response_model=Envelope[UserRead])
def sync_current_identity(
    identity: ExternalIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> Envelope[UserRead]:
    """Create or refresh the internal user for the presented identity token."""

    user = sync_identity(db, identity)
    return Envelope(data=UserRead.model_validate(user))
