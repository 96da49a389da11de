"""
Health check endpoints.
"""

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/ping")
async def ping():
    """Simple endpoint to verify server is running."""
    return {"status": "ok", "message": "pong"}


@router.get("/health")
async def health(request: Request):
    """Report the event hub state."""
    hub = getattr(request.app.state, "events", None)
    return {
        "status": "ok",
        "events": {
            "running": hub is not None and not hub.closed,
            "subscribers": hub.subscriber_count if hub is not None else 0,
        },
    }
