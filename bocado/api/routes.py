"""Root API router."""

from fastapi import APIRouter

from bocado.api.endpoints import (
    achievements,
    client_log,
    enhance,
    notifications,
    photos,
    places,
    reviews,
    users,
)

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "ok"}


router.include_router(places.router)
router.include_router(reviews.router)
router.include_router(photos.router)
router.include_router(achievements.router)
router.include_router(users.router)
router.include_router(notifications.router)
router.include_router(enhance.router)
router.include_router(client_log.router)
