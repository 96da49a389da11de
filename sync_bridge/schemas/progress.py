"""Progress snapshot reported by long running service tasks."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ProgressSnapshot(BaseModel):
    """Current step of a multi-step task. Serialized in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    current_title: str = ""
    current_step: int = 0
    max_steps: int = 0
    finished: bool = False
