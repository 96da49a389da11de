"""
API routers for Sync Bridge.
"""

from fastapi import APIRouter

from .events import router as events_router
from .health import router as health_router

# Main router that aggregates all sub-routers
router = APIRouter()

router.include_router(health_router)
router.include_router(events_router)

__all__ = ["router"]
