"""
JSON wire representation of events.

Each event is a flat JSON object whose "type" field names the variant:

    {"type": "LocaleChanged", "locale": "en_US"}
    {"type": "Progress", "currentTitle": "...", "currentStep": 1, "maxSteps": 3, "finished": false}
    {"type": "ProductChanged", "id": "tumbleweed"}
    {"type": "PatternsChanged", "<pattern-id>": "<status>", ...}
"""

from typing import Any, assert_never

from ..schemas.progress import ProgressSnapshot
from ..schemas.software import PatternStatus
from .models import Event, LocaleChanged, PatternsChanged, ProductChanged, Progress

TYPE_FIELD = "type"


def event_to_wire(event: Event) -> dict[str, Any]:
    """Serialize an event into its flat wire object."""
    if isinstance(event, LocaleChanged):
        return {TYPE_FIELD: event.type, "locale": event.locale}
    elif isinstance(event, Progress):
        return {TYPE_FIELD: event.type, **event.snapshot.model_dump(mode="json", by_alias=True)}
    elif isinstance(event, ProductChanged):
        return {TYPE_FIELD: event.type, "id": event.id}
    elif isinstance(event, PatternsChanged):
        return {TYPE_FIELD: event.type, **{pid: status.value for pid, status in event.patterns.items()}}
    else:
        assert_never(event)


def event_from_wire(data: dict[str, Any]) -> Event:
    """
    Parse a wire object back into an event.

    Raises:
        ValueError: unknown or missing "type", or invalid variant fields
    """
    fields = dict(data)
    kind = fields.pop(TYPE_FIELD, None)

    if kind == "LocaleChanged":
        return LocaleChanged.model_validate(fields)
    if kind == "Progress":
        return Progress(snapshot=ProgressSnapshot.model_validate(fields))
    if kind == "ProductChanged":
        return ProductChanged.model_validate(fields)
    if kind == "PatternsChanged":
        return PatternsChanged(patterns={pid: PatternStatus(status) for pid, status in fields.items()})
    raise ValueError(f"Unknown event type: {kind!r}")
