"""
Sync Bridge - application entry point.

Owns the process-wide event hub: created when the app starts, closed when
it shuts down so that every pending subscriber read finishes.
"""

# Load .env file FIRST, before settings are built
from pathlib import Path
from dotenv import load_dotenv
_env_root = Path(__file__).parent.parent
load_dotenv(_env_root / ".env")

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import router as api_router
from .config import settings
from .events.broadcaster import set_hub
from .events.hub import BroadcastHub

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("sync_bridge.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    hub = BroadcastHub(capacity=settings.events.capacity)
    app.state.events = hub
    set_hub(hub)
    logger.info("Sync Bridge started (api=%s)", settings.api.base_url)
    try:
        yield
    finally:
        hub.close()
        set_hub(None)
        logger.info("Sync Bridge stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="Sync Bridge", lifespan=lifespan)
    app.include_router(api_router)
    return app


app = create_app()
