from ipapi_geo.client import IpApi
from ipapi_geo.errors import (
    ErrorStage,
    InvalidIpError,
    IpApiError,
    JsonParseError,
    LookupFailedError,
    MissingFieldError,
    RequestConstructionError,
    TextEncodingError,
    TransportError,
)
from ipapi_geo.models.common import Coordinates, IpApiResult, NameAndCode

__all__ = [
    "Coordinates",
    "ErrorStage",
    "InvalidIpError",
    "IpApi",
    "IpApiError",
    "IpApiResult",
    "JsonParseError",
    "LookupFailedError",
    "MissingFieldError",
    "NameAndCode",
    "RequestConstructionError",
    "TextEncodingError",
    "TransportError",
]
