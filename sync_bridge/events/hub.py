"""
In-process broadcast hub.

One producer side, many independent subscribers. Every subscription owns a
fixed-capacity ring buffer of (sequence, event) pairs and a cursor holding
the next sequence number it expects. Publishing never waits: when a buffer
is full the oldest entry is dropped, and the gap between the cursor and the
oldest buffered sequence is reported once to that subscriber as Lagged.

All hub state lives on one event loop. Producers running in other threads
go through publish_threadsafe().
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections import deque
from dataclasses import dataclass
from typing import Optional, Union

from .models import Event

logger = logging.getLogger("sync_bridge.events.hub")

DEFAULT_CAPACITY = 16


class HubClosed(Exception):
    """Raised by Subscription.recv() once the hub is closed and drained."""


@dataclass(frozen=True)
class Lagged:
    """Gap marker: the subscriber fell behind and `missed` events were dropped."""

    missed: int


class Subscription:
    """A subscriber's handle and read cursor into the broadcast stream."""

    def __init__(self, hub: BroadcastHub, capacity: int, start_seq: int) -> None:
        self._hub = hub
        self._buffer: deque[tuple[int, Event]] = deque(maxlen=capacity)
        self._cursor = start_seq
        self._ready = asyncio.Event()
        self._closed = False

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> Union[Event, Lagged]:
        try:
            return await self.recv()
        except HubClosed:
            raise StopAsyncIteration from None

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of buffered, undelivered events."""
        return len(self._buffer)

    def _push(self, seq: int, event: Event) -> None:
        if len(self._buffer) == self._buffer.maxlen:
            logger.debug("Subscriber buffer full, dropping event #%d", self._buffer[0][0])
        self._buffer.append((seq, event))
        self._ready.set()

    def _shutdown(self) -> None:
        self._closed = True
        self._ready.set()

    def try_recv(self) -> Union[Event, Lagged, None]:
        """
        Return the next buffered item without waiting.

        Returns:
            The next Event, a Lagged marker if events were dropped since the
            last read, or None if nothing is buffered

        Raises:
            HubClosed: the subscription is closed and nothing is buffered
        """
        if not self._buffer:
            if self._closed:
                raise HubClosed()
            return None

        seq, event = self._buffer[0]
        if seq > self._cursor:
            missed = seq - self._cursor
            self._cursor = seq
            logger.warning("Subscriber lagged, %d event(s) missed", missed)
            return Lagged(missed)

        self._buffer.popleft()
        self._cursor = seq + 1
        return event

    async def recv(self) -> Union[Event, Lagged]:
        """
        Wait for the next event for this subscription.

        Cancelling the waiting task leaves the subscription intact; call
        close() to release it.

        Raises:
            HubClosed: the hub was closed and no events are pending
        """
        while True:
            item = self.try_recv()
            if item is not None:
                return item
            self._ready.clear()
            await self._ready.wait()

    def close(self) -> None:
        """Detach from the hub and discard buffered events."""
        if self._hub is not None:
            self._hub._unsubscribe(self)
            self._hub = None
        self._buffer.clear()
        self._shutdown()


class BroadcastHub:
    """Fans out published events to every live subscription."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1.")
        self.capacity = capacity
        self._subscriptions: weakref.WeakSet[Subscription] = weakref.WeakSet()
        self._seq = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, capacity: Optional[int] = None) -> Subscription:
        """
        Create a subscription that receives events published from now on.

        Subscribing to a closed hub returns an already-closed subscription.

        Raises:
            ValueError: capacity is less than 1
        """
        if capacity is None:
            capacity = self.capacity
        elif capacity < 1:
            raise ValueError("capacity must be at least 1.")
        sub = Subscription(self, capacity, self._seq)
        if self._closed:
            sub._shutdown()
        else:
            self._subscriptions.add(sub)
            logger.debug("Subscriber added (%d active)", len(self._subscriptions))
        return sub

    def _unsubscribe(self, sub: Subscription) -> None:
        self._subscriptions.discard(sub)
        logger.debug("Subscriber removed (%d active)", len(self._subscriptions))

    def publish(self, event: Event) -> int:
        """
        Queue event for every current subscriber.

        Each subscriber receives its own copy. Never blocks and never raises;
        publishing to a closed hub is dropped.

        Returns:
            Number of subscribers the event was queued for
        """
        if self._closed:
            logger.debug("Hub closed, dropping %s", event.type)
            return 0

        seq = self._seq
        self._seq += 1

        subscribers = list(self._subscriptions)
        for sub in subscribers:
            sub._push(seq, event.model_copy(deep=True))
        return len(subscribers)

    def publish_threadsafe(self, loop: asyncio.AbstractEventLoop, event: Event) -> None:
        """Publish from a thread other than the one running loop."""
        loop.call_soon_threadsafe(self.publish, event)

    def close(self) -> None:
        """Close the hub; pending reads finish with HubClosed once drained."""
        if self._closed:
            return
        self._closed = True
        for sub in list(self._subscriptions):
            sub._shutdown()
        self._subscriptions = weakref.WeakSet()
        logger.info("Broadcast hub closed after %d event(s)", self._seq)
