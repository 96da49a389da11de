"""
WebSocket push channel for state-change events.

Each connected client gets its own hub subscription; every event is sent as
its flat JSON wire object. Lag is logged and skipped, hub shutdown closes
the socket.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, WebSocket

from ..events.hub import Lagged, Subscription
from ..events.wire import event_to_wire

logger = logging.getLogger("sync_bridge.api.events")

router = APIRouter(tags=["events"])

SendFn = Callable[[dict[str, Any]], Awaitable[None]]


async def forward_events(subscription: Subscription, send: SendFn) -> int:
    """
    Send every event of subscription until the hub closes.

    Returns:
        Number of events sent
    """
    sent = 0
    async for item in subscription:
        if isinstance(item, Lagged):
            logger.warning("Push client lagged, %d event(s) not delivered", item.missed)
            continue
        await send(event_to_wire(item))
        sent += 1
    return sent


async def _forward_then_close(subscription: Subscription, websocket: WebSocket) -> None:
    await forward_events(subscription, websocket.send_json)
    # Hub shut down
    await websocket.close()


@router.websocket("/ws/events")
async def events_websocket(websocket: WebSocket):
    hub = websocket.app.state.events

    # Subscribe before the handshake completes so the client sees every
    # event published once it is connected
    subscription = hub.subscribe()
    await websocket.accept()
    forward = asyncio.create_task(_forward_then_close(subscription, websocket), name="ws_events_forward")
    logger.info("Event client connected (%d subscribers)", hub.subscriber_count)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        forward.cancel()
        subscription.close()
        logger.info("Event client disconnected (%d subscribers)", hub.subscriber_count)
        (result,) = await asyncio.gather(forward, return_exceptions=True)
        if isinstance(result, Exception):
            logger.warning("Event forwarding failed: %s", result)
