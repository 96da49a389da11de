"""
Create-or-update over a keyed resource collection.

The write verb is chosen from the remote state observed by a GET probe
immediately before the write. The remote may change between the probe and
the write; that window is accepted, not corrected.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any
from urllib.parse import quote

from ..exceptions import ProtocolFailure
from .resource import ResourceClient

logger = logging.getLogger("sync_bridge.clients.upsert")


class UpsertOutcome(str, Enum):
    CREATED = "created"
    REPLACED = "replaced"


def item_path(collection_path: str, resource_id: str) -> str:
    return f"{collection_path.rstrip('/')}/{quote(resource_id, safe='')}"


class UpsertCoordinator:
    """Idempotent create-or-update on top of a ResourceClient."""

    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def upsert(self, collection_path: str, resource_id: str, payload: Any) -> UpsertOutcome:
        """
        Create or replace the resource identified by resource_id.

        Args:
            collection_path: Collection path, e.g. "/network/connections"
            resource_id: Identifier of the resource within the collection
            payload: Resource representation to write

        Returns:
            Which write was issued

        Raises:
            ValueError: resource_id is empty
            RemoteError: probe failed for any reason other than not-found,
                or the write itself failed
        """
        if not resource_id:
            raise ValueError("resource_id must be a non-empty string.")

        path = item_path(collection_path, resource_id)
        try:
            await self._client.fetch(path, Any)
        except ProtocolFailure as e:
            if not e.is_not_found:
                raise
            logger.debug("%s not found, creating in %s", resource_id, collection_path)
            await self._client.create(collection_path, payload)
            return UpsertOutcome.CREATED

        logger.debug("%s exists, replacing", resource_id)
        await self._client.replace(path, payload)
        return UpsertOutcome.REPLACED
