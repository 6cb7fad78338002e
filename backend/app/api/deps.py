"""FastAPI dependencies for the API layer."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.core.errors import UnauthenticatedError
from app.core.security import ExternalIdentity, identity_from_token
from app.database import get_db
from app.models import User
from app.services.identity import resolve_identity

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ExternalIdentity:
    """Verify the bearer token and return the claims it carries."""

    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Not authenticated")
    return identity_from_token(credentials.credentials)


def get_current_user(
    identity: ExternalIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller to an internal user, creating it on first sight."""

    return resolve_identity(db, identity)


def get_list_limit(limit: int | None = None, settings: Settings = Depends(get_settings)) -> int:
    """Bound the ``limit`` query parameter to the configured range."""

    return settings.clamp_limit(limit)
