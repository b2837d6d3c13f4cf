import json
from collections.abc import AsyncIterator, Callable
from http import HTTPStatus
from typing import Any

import httpx

FULL_PAYLOAD: dict[str, Any] = {
    "status": "success",
    "query": "8.8.8.8",
    "country": "United States",
    "countryCode": "US",
    "regionName": "California",
    "region": "CA",
    "city": "Mountain View",
    "zip": "94035",
    "lat": 37.386,
    "lon": -122.0838,
    "timezone": "America/Los_Angeles",
    "isp": "Google",
    "org": "Google",
    "as": "AS15169 Google Inc.",
    "reverse": "dns.google",
    "mobile": True,
    "proxy": True,
}


async def chunked(body: bytes, size: int) -> AsyncIterator[bytes]:
    """Yield `body` in pieces of at most `size` bytes."""
    for start in range(0, len(body), size):
        yield body[start : start + size]


class RecordingTransport(httpx.MockTransport):
    """httpx.MockTransport that remembers every request it has served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def make_http_client(
    body: bytes | None = None,
    status_code: int = HTTPStatus.OK,
    chunk_size: int | None = None,
) -> tuple[httpx.AsyncClient, RecordingTransport]:
    """Build an httpx.AsyncClient whose every GET returns `body` (FULL_PAYLOAD by default).

    With `chunk_size`, the body is streamed as an async iterator of several chunks.
    """
    if body is None:
        body = json.dumps(FULL_PAYLOAD).encode()

    def _handler(request: httpx.Request) -> httpx.Response:
        content = chunked(body, chunk_size) if chunk_size else body
        return httpx.Response(status_code, content=content)

    transport = RecordingTransport(_handler)
    return httpx.AsyncClient(transport=transport), transport


def make_failing_http_client() -> httpx.AsyncClient:
    """httpx.AsyncClient whose requests fail as if the connection was refused."""

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return httpx.AsyncClient(transport=httpx.MockTransport(_handler))
