"""
Remote actions that carry no meaningful request or response body.
"""

from __future__ import annotations

import logging
from typing import Optional

from .resource import ResourceClient

logger = logging.getLogger("sync_bridge.clients.actions")

# Flag value selecting the alternate action path
ALTERNATE_FLAG = "1"


class ActionTrigger:
    """Fires side-effecting actions and reports only success or failure."""

    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def trigger(self, path: str, method: str = "POST") -> None:
        """Send a body-less request to path; any response body is discarded."""
        logger.debug("Triggering %s %s", method, path)
        await self._client.send(method, path)

    async def trigger_variant(
        self,
        flag: Optional[str],
        default_path: str,
        alternate_path: str,
        method: str = "POST",
    ) -> Optional[str]:
        """
        Trigger one of two action paths depending on flag.

        Args:
            flag: None skips the action, "1" selects alternate_path,
                  anything else selects default_path
            default_path: Path used for any set flag other than "1"
            alternate_path: Path used when flag is "1"
            method: HTTP verb

        Returns:
            The path invoked, or None when the action was skipped
        """
        if flag is None:
            logger.debug("Action flag unset, skipping %s", default_path)
            return None

        path = alternate_path if flag == ALTERNATE_FLAG else default_path
        await self.trigger(path, method)
        return path
