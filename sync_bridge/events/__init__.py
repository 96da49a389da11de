"""State-change events and their in-process broadcast."""

from .broadcaster import get_hub, publish_event, set_hub
from .hub import BroadcastHub, HubClosed, Lagged, Subscription
from .models import (
    EVENT_TYPES,
    Event,
    LocaleChanged,
    PatternsChanged,
    ProductChanged,
    Progress,
)
from .wire import event_from_wire, event_to_wire

__all__ = [
    "BroadcastHub",
    "EVENT_TYPES",
    "Event",
    "HubClosed",
    "Lagged",
    "LocaleChanged",
    "PatternsChanged",
    "ProductChanged",
    "Progress",
    "Subscription",
    "event_from_wire",
    "event_to_wire",
    "get_hub",
    "publish_event",
    "set_hub",
]
