"""Verification of identity tokens issued by the external identity provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import jwt

from app.config import get_settings
from app.core.errors import UnauthenticatedError

settings = get_settings()

# Width of users.external_id.
EXTERNAL_ID_MAX_LENGTH = 255


def _truncate(value: str | None, max_length: int) -> str | None:
    if value is None:
        return None
    return value[:max_length].rstrip() or None


def _fit_url(value: str | None) -> str | None:
    # Oversized URLs are dropped, not cut.
    if value is None or len(value) > settings.url_max_length:
        return None
    return value


@dataclass(slots=True)
class ExternalIdentity:
    """Claims extracted from a verified identity token."""

    subject: str
    username: str | None = None
    email: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None

    def __post_init__(self) -> None:
        self.full_name = _truncate(self.full_name, settings.display_name_max_length)
        self.avatar_url = _fit_url(self.avatar_url)

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "ExternalIdentity":
        subject = claims.get("sub")
        if (
            not isinstance(subject, str)
            or not subject.strip()
            or len(subject.strip()) > EXTERNAL_ID_MAX_LENGTH
        ):
            raise UnauthenticatedError("Could not validate credentials")

        def text(key: str) -> str | None:
            value = claims.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            return None

        return cls(
            subject=subject.strip(),
            username=text("username") or text("preferred_username"),
            email=text("email"),
            full_name=text("name"),
            avatar_url=text("picture"),
        )


def decode_identity_token(token: str) -> Dict[str, Any]:
    """Decode and validate an identity token."""

    options = {"require": ["sub", "exp"]}
    kwargs: Dict[str, Any] = {"leeway": settings.identity_jwt_leeway_seconds}
    if settings.identity_jwt_issuer:
        kwargs["issuer"] = settings.identity_jwt_issuer
    if settings.identity_jwt_audience:
        kwargs["audience"] = settings.identity_jwt_audience
    else:
        options["verify_aud"] = False

    try:
        return jwt.decode(
            token,
            settings.identity_verification_key,
            algorithms=[settings.identity_jwt_algorithm],
            options=options,
            **kwargs,
        )
    except jwt.ExpiredSignatureError as exc:
        raise UnauthenticatedError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthenticatedError("Could not validate credentials") from exc


def identity_from_token(token: str) -> ExternalIdentity:
    return ExternalIdentity.from_claims(decode_identity_token(token))
