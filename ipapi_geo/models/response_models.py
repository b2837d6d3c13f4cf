from pydantic import BaseModel

from ipapi_geo.models.common import IpApiResult


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    status: str


class IPLookupResponse(BaseModel):
    """Flattened, outward-facing view of an IpApiResult."""

    ip: str
    country: str | None = None
    country_code: str | None = None
    region: str | None = None
    region_code: str | None = None
    city: str | None = None
    postal_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    isp: str | None = None
    organization: str | None = None
    autonomous_system: str | None = None
    reverse: str | None = None
    mobile: bool = False
    proxy: bool = False

    @classmethod
    def from_result(cls, result: IpApiResult) -> "IPLookupResponse":
        country = result.country
        region = result.region
        location = result.location
        return cls(
            ip=result.query,
            country=country.name if country else None,
            country_code=country.code if country else None,
            region=region.name if region else None,
            region_code=region.code if region else None,
            city=result.city,
            postal_code=result.zip,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            timezone=result.timezone,
            isp=result.isp,
            organization=result.organization,
            autonomous_system=result.autonomous_system,
            reverse=result.reverse,
            mobile=result.mobile,
            proxy=result.proxy,
        )
