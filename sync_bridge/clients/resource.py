"""
Generic typed REST client.

Wraps an httpx.AsyncClient bound to the service base URL. Reads decode the
JSON body into the requested type through a pydantic TypeAdapter; writes
discard the body. Failures are mapped onto the RemoteError taxonomy and
never retried.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Optional, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from ..config import settings
from ..exceptions import DecodeFailure, ProtocolFailure, TransportFailure

logger = logging.getLogger("sync_bridge.clients.resource")

T = TypeVar("T")


@lru_cache(maxsize=128)
def _adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def encode_payload(payload: Any) -> Any:
    """Convert a payload (model, dataclass, mapping...) into JSON-ready data.

    Fields the caller never set are left out; explicit nulls are kept.
    """
    return _adapter(type(payload)).dump_python(payload, mode="json", by_alias=True, exclude_unset=True)


class ResourceClient:
    """Async HTTP/JSON client for one service base URL."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Service base URL (defaults to settings.api.base_url)
            timeout: HTTP timeout in seconds (defaults to settings.api.timeout)
            transport: Optional httpx transport, e.g. httpx.MockTransport
            client: Pre-built AsyncClient; it is not closed by aclose()

        Raises:
            ValueError: both transport and client were given
        """
        self.base_url = (base_url or settings.api.base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.api.timeout
        if client is not None and transport is not None:
            raise ValueError("Pass either client or transport, not both.")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self._timeout, transport=transport)

    async def __aenter__(self) -> ResourceClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def url_for(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    # --- Verbs ---

    async def fetch(self, path: str, response_type: type[T] | Any = Any) -> T:
        """GET path and decode the body as response_type."""
        response = await self._request("GET", path)
        return self._decode(response, response_type)

    async def create(self, path: str, payload: Any) -> None:
        """POST payload; the response body is discarded."""
        await self._request("POST", path, payload)

    async def create_returning(self, path: str, payload: Any, response_type: type[T] | Any = Any) -> T:
        """POST payload and decode the created resource from the body."""
        response = await self._request("POST", path, payload)
        return self._decode(response, response_type)

    async def replace(self, path: str, payload: Any) -> None:
        """PUT payload; the response body is discarded."""
        await self._request("PUT", path, payload)

    async def delete(self, path: str) -> None:
        await self._request("DELETE", path)

    async def send(self, method: str, path: str) -> None:
        """Issue a request without a body and discard the response body."""
        await self._request(method, path)

    # --- Internal ---

    async def _request(self, method: str, path: str, payload: Any = None) -> httpx.Response:
        url = self.url_for(path)
        kwargs: dict[str, Any] = {}
        if payload is not None:
            kwargs["json"] = encode_payload(payload)

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("%s %s: transport failure: %r", method, url, e)
            raise TransportFailure(method, url, e) from e

        if not response.is_success:
            logger.warning("%s %s: status %d", method, url, response.status_code)
            raise ProtocolFailure(
                method,
                url,
                status=response.status_code,
                body=response.text,
                error_body=_parse_error_body(response),
            )

        logger.debug("%s %s: status %d", method, url, response.status_code)
        return response

    def _decode(self, response: httpx.Response, response_type: Any) -> Any:
        try:
            return _adapter(response_type).validate_json(response.content)
        except ValidationError as e:
            method = response.request.method
            url = str(response.request.url)
            logger.warning("%s %s: could not decode body as %r", method, url, response_type)
            raise DecodeFailure(method, url, response.text, e) from e


def _parse_error_body(response: httpx.Response) -> Optional[Any]:
    if not response.content:
        return None
    try:
        return json.loads(response.content)
    except ValueError:
        return None
