"""Software selection payloads."""

from enum import Enum


class PatternStatus(str, Enum):
    """Selection status of a software pattern."""

    AVAILABLE = "available"
    USER_SELECTED = "user_selected"
    AUTO_SELECTED = "auto_selected"
