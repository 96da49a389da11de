"""
Errors raised by the remote client layer.

Every failed remote call surfaces as one of three RemoteError kinds:
no response (TransportFailure), a non-2xx response (ProtocolFailure),
or a 2xx response whose body has the wrong shape (DecodeFailure).
"""

from typing import Any, Optional

BODY_SNIPPET_LIMIT = 512


def body_snippet(text: str, limit: int = BODY_SNIPPET_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class RemoteError(Exception):
    """Base exception for all remote call failures."""

    def __init__(self, message: str, method: str, url: str):
        self.method = method
        self.url = url
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return "remote call failed"


class TransportFailure(RemoteError):
    """Raised when no response was obtained (connection, DNS, timeout)."""

    def __init__(self, method: str, url: str, cause: Exception):
        self.cause = cause
        super().__init__(f"{method} {url} failed: {cause!r}", method, url)

    @property
    def user_message(self) -> str:
        return "service unreachable"


class ProtocolFailure(RemoteError):
    """Raised when the service answered with a non-2xx status."""

    def __init__(
        self,
        method: str,
        url: str,
        status: int,
        body: str = "",
        error_body: Optional[Any] = None,
    ):
        self.status = status
        self.body = body_snippet(body)
        self.error_body = error_body
        super().__init__(f"{method} {url} returned {status}: {self.body}", method, url)

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def user_message(self) -> str:
        return f"rejected: {self.status}"


class DecodeFailure(RemoteError):
    """Raised when a 2xx body does not match the expected shape."""

    def __init__(self, method: str, url: str, body: str, cause: Exception):
        self.body = body_snippet(body)
        self.cause = cause
        super().__init__(f"{method} {url} returned an unexpected body: {cause}", method, url)

    @property
    def user_message(self) -> str:
        return "unexpected response shape"
