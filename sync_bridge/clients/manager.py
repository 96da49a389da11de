"""
Manager service client.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..config import read_probe_sync_flag
from .actions import ActionTrigger
from .resource import ResourceClient

logger = logging.getLogger("sync_bridge.clients.manager")

PROBE_PATH = "/manager/probe"
PROBE_SYNC_PATH = "/manager/probe_sync"

_UNSET = object()


class ManagerClient:
    """HTTP/JSON client for the manager service."""

    def __init__(
        self,
        client: ResourceClient,
        probe_flag: Callable[[], Optional[str]] = read_probe_sync_flag,
    ) -> None:
        """
        Args:
            client: Shared resource client
            probe_flag: Called on every probe() to read the variant flag
        """
        self._actions = ActionTrigger(client)
        self._probe_flag = probe_flag

    async def probe(self, probe_sync=_UNSET) -> Optional[str]:
        """
        Start probing the system.

        The variant flag is taken from probe_sync when given, otherwise from
        the flag provider at call time.

        Returns:
            The path that was called, or None when probing was skipped
        """
        flag = self._probe_flag() if probe_sync is _UNSET else probe_sync
        path = await self._actions.trigger_variant(flag, PROBE_PATH, PROBE_SYNC_PATH)
        if path is None:
            logger.info("Probe skipped (no probe flag)")
        return path
