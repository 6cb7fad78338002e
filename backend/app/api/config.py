"""Configuration endpoints for exposing runtime options to clients."""

from __future__ import annotations

from fastapi import APIRouter

from app.config import get_settings

router = APIRouter(prefix="/config", tags=["config"])


@router.get("")
def read_client_config() -> dict[str, object]:
    """Expose content limits so clients can validate before submitting."""

    settings = get_settings()
    return {
        "success": True,
        "data": {
            "limits": {
                "handle": settings.handle_max_length,
                "bio": settings.bio_max_length,
                "caption": settings.caption_max_length,
                "comment": settings.comment_max_length,
                "message": settings.message_max_length,
            },
            "lists": {
                "defaultLimit": settings.list_default_limit,
                "maxLimit": settings.list_max_limit,
            },
        },
    }
