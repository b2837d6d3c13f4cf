from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from ipapi_geo.errors import (
    InvalidIpError,
    JsonParseError,
    LookupFailedError,
    MissingFieldError,
    TextEncodingError,
    TransportError,
)
from ipapi_geo.exception_handlers import _build_validation_error_payload
from ipapi_geo.main import app, get_ip_api_client
from ipapi_geo.models.common import Coordinates, IpApiResult, NameAndCode
from ipapi_geo.models.request_models import IPLookupRequest


class _StubClient:
    """Test double for IpApi that returns a fixed result and records requested addresses."""

    def __init__(self, result: IpApiResult) -> None:
        self._result = result
        self.requested: list[str | None] = []

    async def request(self, ip: str | None = None) -> IpApiResult:
        self.requested.append(ip)
        return self._result


class _ErrorRaisingClient:
    """Test double for IpApi that always raises a configured exception."""

    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    async def request(self, ip: str | None = None) -> IpApiResult:
        raise self._exc


def _get(path: str, ip_api: object) -> tuple[int, dict]:
    app.dependency_overrides[get_ip_api_client] = lambda: ip_api
    client = TestClient(app)
    try:
        response = client.get(path)
        return response.status_code, response.json()
    finally:
        app.dependency_overrides.clear()


def _call_lookup_with_error(exc: Exception) -> tuple[int, dict]:
    """Helper that wires a failing client and calls the /v1/ip/lookup endpoint."""
    return _get("/v1/ip/lookup?ip=8.8.8.8", _ErrorRaisingClient(exc))


def test_health() -> None:
    status_code, body = _get("/health", None)

    assert status_code == 200
    assert body == {"status": "ok"}


def test_ip_lookup_returns_flattened_result() -> None:
    stub = _StubClient(
        IpApiResult(
            query="8.8.8.8",
            country=NameAndCode(name="United States", code="US"),
            city="Mountain View",
            location=Coordinates(latitude=37.386, longitude=-122.0838),
        )
    )

    status_code, body = _get("/v1/ip/lookup?ip=8.8.8.8", stub)

    assert status_code == 200
    assert stub.requested == ["8.8.8.8"]
    assert body["ip"] == "8.8.8.8"
    assert body["country"] == "United States"
    assert body["country_code"] == "US"
    assert body["region"] is None
    assert body["city"] == "Mountain View"
    assert body["latitude"] == 37.386
    assert body["longitude"] == -122.0838
    assert body["mobile"] is False


def test_ip_lookup_without_ip_requests_own_address() -> None:
    stub = _StubClient(IpApiResult(query="203.0.113.7"))

    status_code, body = _get("/v1/ip/lookup", stub)

    assert status_code == 200
    assert stub.requested == [None]
    assert body["ip"] == "203.0.113.7"


def test_ip_lookup_rejects_invalid_ip_with_400() -> None:
    status_code, body = _get("/v1/ip/lookup?ip=qwerty", _StubClient(IpApiResult(query="8.8.8.8")))

    assert status_code == 400
    assert body["code"] == "invalid_ip"


def test_ip_lookup_maps_invalid_ip_error_to_400() -> None:
    status_code, body = _call_lookup_with_error(InvalidIpError("Invalid IP Address"))

    assert status_code == 400
    assert body["detail"]["code"] == "invalid_ip"
    assert body["detail"]["stage"] == "request"


def test_ip_lookup_maps_lookup_failed_error_to_400() -> None:
    status_code, body = _call_lookup_with_error(LookupFailedError("private range"))

    assert status_code == 400
    assert body["detail"]["code"] == "lookup_failed"
    assert "private range" in body["detail"]["message"]


def test_ip_lookup_maps_transport_error_to_502() -> None:
    status_code, body = _call_lookup_with_error(TransportError("Upstream failure"))

    assert status_code == 502
    assert body["detail"]["code"] == "upstream_error"
    assert body["detail"]["stage"] == "transport"
    assert "Upstream failure" in body["detail"]["message"]


def test_ip_lookup_maps_decode_errors_to_502() -> None:
    for exc, stage in [
        (TextEncodingError("bad utf-8"), "encoding"),
        (JsonParseError("bad json"), "parse"),
        (MissingFieldError("query"), "projection"),
    ]:
        status_code, body = _call_lookup_with_error(exc)

        assert status_code == 502
        assert body["detail"]["code"] == "invalid_upstream_response"
        assert body["detail"]["stage"] == stage


def test_validation_error_payload_for_ip() -> None:
    with pytest.raises(ValidationError) as exc_info:
        IPLookupRequest(ip="qwerty")

    assert _build_validation_error_payload(exc_info.value) == {
        "code": "invalid_ip",
        "message": "The supplied IP address is not a valid IPv4 or IPv6 address.",
    }


def test_lifespan_shares_one_client_and_closes_it() -> None:
    """All requests get the same IpApi; its httpx client is closed on shutdown."""
    with TestClient(app) as client:
        ip_api = app.state.ip_api
        assert client.get("/health").status_code == 200
        assert get_ip_api_client(SimpleNamespace(app=app)) is ip_api
        assert get_ip_api_client(SimpleNamespace(app=app)) is ip_api
        http_client = ip_api._client
        assert not http_client.is_closed

    assert http_client.is_closed
