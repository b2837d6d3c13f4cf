from http import HTTPStatus
from types import TracebackType

import httpx

from ipapi_geo.decoder import decode_stream
from ipapi_geo.errors import TransportError
from ipapi_geo.logger import logger
from ipapi_geo.models.common import IpApiResult
from ipapi_geo.request_builder import IpInput, build_request_url


class IpApi:
    """Client for the http://ip-api.com JSON API.

    The instance only holds the httpx.AsyncClient used to execute requests, so
    concurrent `request` calls are independent and share httpx's connection pool.
    A client passed in by the caller is left open; one created here is closed by
    `aclose()` or on leaving `async with`.
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None, timeout_seconds: float = 5.0) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def __aenter__(self) -> "IpApi":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(self, ip: IpInput = None) -> IpApiResult:
        """Look up geolocation information for `ip`, or for the caller's own address if omitted.

        Raises InvalidIpError before any I/O for a malformed address, TransportError when
        the exchange fails, and TextEncodingError / JsonParseError / MissingFieldError /
        LookupFailedError when the body cannot be turned into a result.
        """
        url = build_request_url(ip)
        logger.debug(f"Requesting ip-api.com lookup url={url}")

        try:
            async with self._client.stream("GET", url) as response:
                self._handle_http_errors(response)
                result = await decode_stream(response.aiter_bytes())
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to ip-api.com failed: {repr(exc)}") from exc

        logger.debug(f"ip-api.com lookup succeeded url={url} query={result.query}")
        return result

    @staticmethod
    def _handle_http_errors(response: httpx.Response) -> None:
        """Reject non-2xx responses; the body is not inspected."""
        status_code = response.status_code

        if status_code == HTTPStatus.TOO_MANY_REQUESTS:
            raise TransportError("ip-api.com rate limit exceeded (HTTP 429).")

        if not response.is_success:
            raise TransportError(f"ip-api.com returned HTTP {status_code}.")
