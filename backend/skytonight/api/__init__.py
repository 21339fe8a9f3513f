"""API routes for Sky Tonight."""

from fastapi import APIRouter

from skytonight.api.sky_objects import router as sky_objects_router
from skytonight.api.stella_chat import router as stella_chat_router

router = APIRouter()

router.include_router(sky_objects_router)
router.include_router(stella_chat_router)


@router.get("/health")
def health_check():
    """Liveness probe."""
    return {"status": "ok", "service": "sky-tonight"}
