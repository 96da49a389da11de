"""
State-change notifications published through the broadcast hub.

The set of variants is closed: every consumer dispatches exhaustively over
EVENT_TYPES, so adding a variant means updating each consumer.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ..schemas.progress import ProgressSnapshot
from ..schemas.software import PatternStatus


class _EventBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class LocaleChanged(_EventBase):
    type: Literal["LocaleChanged"] = "LocaleChanged"
    locale: str


class Progress(_EventBase):
    type: Literal["Progress"] = "Progress"
    snapshot: ProgressSnapshot


class ProductChanged(_EventBase):
    type: Literal["ProductChanged"] = "ProductChanged"
    id: str


class PatternsChanged(_EventBase):
    type: Literal["PatternsChanged"] = "PatternsChanged"
    patterns: dict[str, PatternStatus] = Field(default_factory=dict)


Event = Annotated[
    Union[LocaleChanged, Progress, ProductChanged, PatternsChanged],
    Field(discriminator="type"),
]

EVENT_TYPES = (LocaleChanged, Progress, ProductChanged, PatternsChanged)
