"""
Payload models exchanged with the management service.
"""

from .network import AccessPoint, Device, NetworkConnection, NetworkSettings
from .progress import ProgressSnapshot
from .software import PatternStatus

__all__ = [
    "AccessPoint",
    "Device",
    "NetworkConnection",
    "NetworkSettings",
    "PatternStatus",
    "ProgressSnapshot",
]
