"""
Typed HTTP/JSON clients for the management service.
"""

from .actions import ActionTrigger
from .manager import ManagerClient
from .network import NetworkClient
from .resource import ResourceClient
from .upsert import UpsertCoordinator, UpsertOutcome

__all__ = [
    "ActionTrigger",
    "ManagerClient",
    "NetworkClient",
    "ResourceClient",
    "UpsertCoordinator",
    "UpsertOutcome",
]
