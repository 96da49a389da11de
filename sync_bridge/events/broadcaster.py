"""
Process-wide event hub registration.

main.py creates the BroadcastHub at startup and registers it with
set_hub(). Any module can then call publish_event() without holding a
reference to the application, from the hub's event loop or from a worker
thread.
"""

import asyncio
import logging
from typing import Optional

from .hub import BroadcastHub
from .models import Event

logger = logging.getLogger("sync_bridge.events.broadcaster")

_hub: Optional[BroadcastHub] = None
_loop: Optional[asyncio.AbstractEventLoop] = None


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def set_hub(hub: Optional[BroadcastHub], loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
    """
    Register the process-wide hub.

    Args:
        hub: Hub created at startup, or None to unregister at shutdown
        loop: Loop that owns the hub; defaults to the running loop, if any
    """
    global _hub, _loop
    _hub = hub
    _loop = (loop or _running_loop()) if hub is not None else None
    if hub is not None:
        logger.info("Event hub registered (capacity=%d)", hub.capacity)


def get_hub() -> Optional[BroadcastHub]:
    return _hub


def publish_event(event: Event) -> Optional[int]:
    """
    Publish event through the registered hub.

    Silently no-ops if no hub has been registered yet (e.g. during early
    startup or in tools that never start the app). Callers outside the hub's
    loop are handed off to it with call_soon_threadsafe.

    Returns:
        Number of subscribers reached, or None when the publish was handed
        off to the hub's loop
    """
    if _hub is None:
        logger.debug("No event hub registered, dropping %s", event.type)
        return 0
    if _loop is not None and _running_loop() is not _loop:
        _hub.publish_threadsafe(_loop, event)
        return None
    return _hub.publish(event)
