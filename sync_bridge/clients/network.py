"""
Network service client.

Devices, connections and general settings over the HTTP/JSON API.
Connection changes are written to the service and made effective with
apply().
"""

from __future__ import annotations

import logging

from ..schemas.network import AccessPoint, Device, NetworkConnection, NetworkSettings
from .actions import ActionTrigger
from .resource import ResourceClient
from .upsert import UpsertCoordinator, UpsertOutcome, item_path

logger = logging.getLogger("sync_bridge.clients.network")

CONNECTIONS_PATH = "/network/connections"
DEVICES_PATH = "/network/devices"
SETTINGS_PATH = "/network/settings"
WIFI_PATH = "/network/wifi"
APPLY_PATH = "/network/system/apply"


class NetworkClient:
    """HTTP/JSON client for the network service."""

    def __init__(self, client: ResourceClient) -> None:
        self.client = client
        self._upsert = UpsertCoordinator(client)
        self._actions = ActionTrigger(client)

    async def devices(self) -> list[Device]:
        return await self.client.fetch(DEVICES_PATH, list[Device])

    async def connections(self) -> list[NetworkConnection]:
        return await self.client.fetch(CONNECTIONS_PATH, list[NetworkConnection])

    async def connection(self, connection_id: str) -> NetworkConnection:
        return await self.client.fetch(item_path(CONNECTIONS_PATH, connection_id), NetworkConnection)

    async def settings(self) -> NetworkSettings:
        return await self.client.fetch(SETTINGS_PATH, NetworkSettings)

    async def access_points(self) -> list[AccessPoint]:
        """Returns the list of visible wireless access points."""
        return await self.client.fetch(WIFI_PATH, list[AccessPoint])

    async def add_connection(self, connection: NetworkConnection) -> NetworkConnection:
        """Adds a new connection and returns it as stored by the service."""
        return await self.client.create_returning(CONNECTIONS_PATH, connection, NetworkConnection)

    async def update_connection(self, connection: NetworkConnection) -> None:
        """Replaces an existing connection, matched by id, and applies the change."""
        await self.client.replace(item_path(CONNECTIONS_PATH, connection.id), connection)
        await self.apply()

    async def add_or_update_connection(self, connection: NetworkConnection) -> UpsertOutcome:
        """Updates the connection if the service knows its id, otherwise adds it."""
        outcome = await self._upsert.upsert(CONNECTIONS_PATH, connection.id, connection)
        logger.info("Connection %s %s", connection.id, outcome.value)
        return outcome

    async def delete_connection(self, connection_id: str) -> None:
        await self.client.delete(item_path(CONNECTIONS_PATH, connection_id))
        await self.apply()

    async def connect_to(self, connection: NetworkConnection) -> NetworkConnection:
        """Adds the connection and applies it so it gets activated."""
        added = await self.add_connection(connection)
        await self.apply()
        return added

    async def apply(self) -> None:
        """Makes pending network changes effective."""
        await self._actions.trigger(APPLY_PATH, method="PUT")
