"""Map external identities onto internal user records."""

from __future__ import annotations

import logging
import re

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.errors import ValidationError
from app.core.security import ExternalIdentity
from app.models import User
from app.monitoring.metrics import identity_race_recoveries_total

logger = logging.getLogger(__name__)
settings = get_settings()

_HANDLE_INVALID_CHARS = re.compile(r"[^a-z0-9._]+")
_MAX_HANDLE_ATTEMPTS = 5


def _clean_handle(raw: str) -> str:
    cleaned = _HANDLE_INVALID_CHARS.sub("", raw.strip().lower())
    return cleaned[: settings.handle_max_length]


def derive_handle(identity: ExternalIdentity) -> str:
    """Pick the initial handle for a newly seen identity.

    Preference order is the provider username, then the local part of the
    email address, then ``user_`` followed by the first eight characters of the
    external id.
    """

    candidates: list[str] = []
    if identity.username:
        candidates.append(identity.username)
    if identity.email and "@" in identity.email:
        candidates.append(identity.email.split("@", 1)[0])
    for candidate in candidates:
        cleaned = _clean_handle(candidate)
        if cleaned:
            return cleaned
    return _clean_handle(f"user_{identity.subject[:8]}") or "user"


def _handle_candidates(identity: ExternalIdentity):
    base = derive_handle(identity)
    yield base
    suffix_source = _clean_handle(identity.subject) or "x"
    for attempt in range(1, _MAX_HANDLE_ATTEMPTS):
        suffix = f"_{suffix_source[: 4 * attempt]}"
        yield base[: settings.handle_max_length - len(suffix)] + suffix


def get_user_by_external_id(db: Session, external_id: str) -> User | None:
    stmt = select(User).where(User.external_id == external_id)
    return db.execute(stmt).scalar_one_or_none()


def _handle_taken(db: Session, handle: str) -> bool:
    stmt = select(User.id).where(User.handle == handle)
    return db.execute(stmt).first() is not None


def resolve_identity(db: Session, identity: ExternalIdentity) -> User:
    """Return the user for ``identity``, creating the record on first sight."""

    user = get_user_by_external_id(db, identity.subject)
    if user is not None:
        return user

    for handle in _handle_candidates(identity):
        if _handle_taken(db, handle):
            continue
        user = User(
            external_id=identity.subject,
            handle=handle,
            display_name=identity.full_name,
            avatar_url=identity.avatar_url,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            winner = get_user_by_external_id(db, identity.subject)
            if winner is not None:
                identity_race_recoveries_total.inc()
                logger.warning(
                    "Concurrent first sight of identity %s; using user %s",
                    identity.subject,
                    winner.id,
                )
                return winner
            # Lost a race on the handle instead; try the next candidate.
            continue
        db.refresh(user)
        logger.info("Created user %s (%s) for identity %s", user.id, user.handle, identity.subject)
        return user

    raise ValidationError(
        "Could not allocate a unique handle for this identity",
        details={"subject": identity.subject},
    )


def sync_identity(db: Session, identity: ExternalIdentity) -> User:
    """Upsert the user and refresh provider-owned profile fields.

    The handle is left untouched once allocated.
    """

    user = resolve_identity(db, identity)
    changed = False
    if identity.full_name and identity.full_name != user.display_name:
        user.display_name = identity.full_name
        changed = True
    if identity.avatar_url and identity.avatar_url != user.avatar_url:
        user.avatar_url = identity.avatar_url
        changed = True
    if changed:
        db.commit()
        db.refresh(user)
        logger.debug("Refreshed provider fields for user %s", user.id)
    return user
