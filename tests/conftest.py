"""
Shared fixtures: an in-memory stub of the management service served
through httpx.MockTransport.
"""

import json
from typing import Any, Callable, Union

import httpx
import pytest
import pytest_asyncio

from sync_bridge.clients.resource import ResourceClient

BASE_URL = "http://stub.test/api"
PREFIX = "/api"

Override = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class StubBackend:
    """Keyed JSON resources plus a log of every request received.

    POST to a registered collection stores the body under
    <collection>/<body id>; POST anywhere else is treated as an action.
    """

    def __init__(self) -> None:
        self.resources: dict[str, Any] = {}
        self.collections: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.bodies: list[bytes] = []
        self.overrides: dict[tuple[str, str], Override] = {}

    def seed(self, collection: str, *items: dict[str, Any]) -> None:
        self.collections.add(collection)
        for item in items:
            self.resources[f"{collection}/{item['id']}"] = item

    def override(self, method: str, path: str, outcome: Override) -> None:
        self.overrides[(method, path)] = outcome

    def count(self, method: str, path: str = None) -> int:
        return sum(1 for m, p in self.calls if m == method and (path is None or p == path))

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith(PREFIX):
            path = path[len(PREFIX):]
        method = request.method
        self.calls.append((method, path))
        self.bodies.append(request.content)

        outcome = self.overrides.get((method, path))
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return outcome
        if outcome is not None:
            return outcome(request)

        if method == "GET":
            if path in self.collections:
                prefix = path + "/"
                return httpx.Response(200, json=[v for k, v in self.resources.items() if k.startswith(prefix)])
            if path in self.resources:
                return httpx.Response(200, json=self.resources[path])
            return _not_found(path)

        if method == "PUT":
            if path not in self.resources:
                return _not_found(path)
            self.resources[path] = json.loads(request.content)
            return httpx.Response(200)

        if method == "POST":
            if path in self.collections:
                item = json.loads(request.content)
                self.resources[f"{path}/{item['id']}"] = item
                return httpx.Response(201, json=item)
            return httpx.Response(200)

        if method == "DELETE":
            if self.resources.pop(path, None) is None:
                return _not_found(path)
            return httpx.Response(204)

        return httpx.Response(405)


def _not_found(path: str) -> httpx.Response:
    return httpx.Response(404, json={"error": f"{path} not found"})


@pytest.fixture
def backend() -> StubBackend:
    return StubBackend()


@pytest_asyncio.fixture
async def client(backend: StubBackend):
    async with ResourceClient(BASE_URL, transport=httpx.MockTransport(backend.handler)) as rc:
        yield rc
