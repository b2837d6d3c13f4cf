from ipaddress import IPv4Address, IPv6Address, ip_address

import httpx

from ipapi_geo.errors import InvalidIpError, RequestConstructionError

# Parsed at import time: a malformed constant must break the import, not a lookup.
BASE_URL = httpx.URL("http://ip-api.com/json")

IpInput = IPv4Address | IPv6Address | str | None


def normalize_ip(ip: IpInput) -> IPv4Address | IPv6Address | None:
    """Turn the caller's input into an address object.

    - None or blank string -> None (the service resolves the caller's own address).
    - Address objects are passed through.
    - Any other string must be an IPv4 or IPv6 literal, otherwise InvalidIpError.
    """
    if ip is None or isinstance(ip, (IPv4Address, IPv6Address)):
        return ip

    value = str(ip).strip()
    if not value:
        return None

    try:
        return ip_address(value)
    except ValueError as exc:
        raise InvalidIpError(f"{value!r} is not a valid IPv4 or IPv6 address.") from exc


def build_request_url(ip: IpInput = None) -> httpx.URL:
    """Build the ip-api.com request target for an optional address."""
    address = normalize_ip(ip)
    if address is None:
        return BASE_URL

    try:
        return httpx.URL(f"{BASE_URL}/{address}")
    except httpx.InvalidURL as exc:
        raise RequestConstructionError(
            f"Could not create the ip-api.com request URL for {address}. "
            "This is an implementation error, please report it."
        ) from exc
