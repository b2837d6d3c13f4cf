from pydantic import BaseModel, Field, field_validator

from ipapi_geo.errors import InvalidIpError
from ipapi_geo.request_builder import normalize_ip


class IPLookupRequest(BaseModel):
    """Query parameters of the lookup endpoint.

    If `ip` is omitted, null or blank, the lookup resolves the address ip-api.com sees,
    i.e. the address of this service.
    """

    ip: str | None = Field(
        default=None,
        description="IPv4 or IPv6 address to look up. If omitted, the service's own public IP is used.",
        examples=["8.8.8.8", "2001:4860:4860::8888"],
    )

    @field_validator("ip", mode="before")
    @classmethod
    def _validate_ip(cls, value: str | None) -> str | None:
        """Reject non-blank values that are not IPv4/IPv6 literals and return the canonical form."""
        try:
            address = normalize_ip(value)
        except InvalidIpError as exc:
            raise ValueError("ip must be a valid IPv4 or IPv6 address") from exc

        return str(address) if address is not None else None
