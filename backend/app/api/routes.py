from fastapi import APIRouter

from app.api.comments import router as comments_router
from app.api.config import router as config_router
from app.api.conversations import router as conversations_router
from app.api.follows import router as follows_router
from app.api.identity import router as identity_router
from app.api.likes import router as likes_router
from app.api.messages import router as messages_router
from app.api.posts import router as posts_router
from app.api.saved_posts import router as saved_posts_router
from app.api.users import router as users_router

router = APIRouter()

router.include_router(config_router)
router.include_router(identity_router)
router.include_router(users_router)
router.include_router(follows_router)
router.include_router(posts_router)
router.include_router(likes_router)
router.include_router(comments_router)
router.include_router(saved_posts_router)
router.include_router(conversations_router)
router.include_router(messages_router)


@router.get("/", tags=["root"])
def read_root() -> dict[str, str]:
    return {"message": "Welcome to the Mosaic API"}
