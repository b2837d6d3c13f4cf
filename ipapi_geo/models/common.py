from pydantic import BaseModel, ConfigDict


class NameAndCode(BaseModel):
    """Display name plus short code, e.g. ("United States", "US")."""

    model_config = ConfigDict(frozen=True)

    name: str
    code: str


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class IpApiResult(BaseModel):
    """Typed geolocation data decoded from an ip-api.com JSON response.

    `query` is the address the service reports it resolved. Every other field is
    derived independently from the response document and is absent (None) when the
    service did not provide it; `mobile` and `proxy` default to False.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    country: NameAndCode | None = None
    region: NameAndCode | None = None
    city: str | None = None
    zip: str | None = None
    location: Coordinates | None = None
    timezone: str | None = None
    isp: str | None = None
    organization: str | None = None
    autonomous_system: str | None = None
    reverse: str | None = None
    mobile: bool = False
    proxy: bool = False
