import json
from collections.abc import AsyncIterable, Mapping
from typing import Any

from ipapi_geo.errors import JsonParseError, LookupFailedError, MissingFieldError, TextEncodingError
from ipapi_geo.models.common import Coordinates, IpApiResult, NameAndCode


def _lookup(document: Any, key: str) -> Any:
    if not isinstance(document, Mapping):
        return None
    return document.get(key)


def get_string(document: Any, key: str) -> str | None:
    """Return the value of `key` if it is a JSON string, otherwise None."""
    value = _lookup(document, key)
    return value if isinstance(value, str) else None


def get_number(document: Any, key: str) -> float | None:
    """Return the value of `key` as a float if it is a JSON number, otherwise None."""
    value = _lookup(document, key)
    # bool is an int subclass, but true/false are not JSON numbers.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def get_bool(document: Any, key: str) -> bool:
    """Return the value of `key` if it is a JSON boolean, otherwise False."""
    value = _lookup(document, key)
    return value if isinstance(value, bool) else False


def get_name_and_code(document: Any, name_key: str, code_key: str) -> NameAndCode | None:
    """Both halves must be non-empty strings; ip-api.com sends "" for unknown regions."""
    name = get_string(document, name_key)
    code = get_string(document, code_key)
    if not name or not code:
        return None
    return NameAndCode(name=name, code=code)


def get_coordinates(document: Any, latitude_key: str, longitude_key: str) -> Coordinates | None:
    latitude = get_number(document, latitude_key)
    longitude = get_number(document, longitude_key)
    if latitude is None or longitude is None:
        return None
    return Coordinates(latitude=latitude, longitude=longitude)


async def collect_body(chunks: AsyncIterable[bytes]) -> bytes:
    """Drain an async byte stream into a single buffer, preserving chunk order."""
    buffer = bytearray()
    async for chunk in chunks:
        buffer.extend(chunk)
    return bytes(buffer)


def decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise TextEncodingError(f"Response body is not valid UTF-8: {exc}") from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant {name!r}")


def parse_document(text: str) -> Any:
    """Parse strict JSON; NaN/Infinity and input nested past the recursion limit are rejected."""
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise JsonParseError(f"Failed to decode ip-api.com response as JSON: {exc}") from exc


def _handle_service_status(document: Any) -> None:
    """ip-api.com reports failed lookups with HTTP 200 and `"status": "fail"`.

    Example:
        {"status": "fail", "message": "private range", "query": "192.168.0.1"}
    """
    if get_string(document, "status") != "fail":
        return

    message = get_string(document, "message") or "Unknown error from ip-api.com"
    raise LookupFailedError(message)


def project_result(document: Any) -> IpApiResult:
    """Map ip-api.com's top-level fields into an IpApiResult.

    Only `query` is mandatory. Missing or mistyped optional fields are absent in the
    result; `mobile` and `proxy` fall back to False.
    """
    _handle_service_status(document)

    query = get_string(document, "query")
    if query is None:
        raise MissingFieldError("query")

    return IpApiResult(
        query=query,
        country=get_name_and_code(document, "country", "countryCode"),
        region=get_name_and_code(document, "regionName", "region"),
        city=get_string(document, "city"),
        zip=get_string(document, "zip"),
        location=get_coordinates(document, "lat", "lon"),
        timezone=get_string(document, "timezone"),
        isp=get_string(document, "isp"),
        organization=get_string(document, "org"),
        autonomous_system=get_string(document, "as"),
        reverse=get_string(document, "reverse"),
        mobile=get_bool(document, "mobile"),
        proxy=get_bool(document, "proxy"),
    )


def decode_body(data: bytes) -> IpApiResult:
    return project_result(parse_document(decode_text(data)))


async def decode_stream(chunks: AsyncIterable[bytes]) -> IpApiResult:
    """Collect, decode, parse and project a streamed response body."""
    return decode_body(await collect_body(chunks))
