from enum import Enum


class ErrorStage(str, Enum):
    """Pipeline stage at which a lookup failed."""

    request = "request"
    transport = "transport"
    encoding = "encoding"
    parse = "parse"
    projection = "projection"


class IpApiError(Exception):
    """Base error for ip-api.com lookups."""

    stage: ErrorStage


class InvalidIpError(IpApiError):
    """Raised when the supplied IP address is not a valid IPv4 or IPv6 literal."""

    stage = ErrorStage.request


class TransportError(IpApiError):
    """Raised when the HTTP exchange with ip-api.com could not be completed."""

    stage = ErrorStage.transport


class TextEncodingError(IpApiError):
    """Raised when the response body is not valid UTF-8."""

    stage = ErrorStage.encoding


class JsonParseError(IpApiError):
    """Raised when the response body is not a syntactically valid JSON document."""

    stage = ErrorStage.parse


class MissingFieldError(IpApiError):
    """Raised when a mandatory field is absent from the response document."""

    stage = ErrorStage.projection

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Response document is missing the required field {field!r}.")


class LookupFailedError(IpApiError):
    """Raised when ip-api.com answers with `"status": "fail"` (e.g. private or reserved range)."""

    stage = ErrorStage.projection


class RequestConstructionError(RuntimeError):
    """Raised when the request URL cannot be built.

    Signals a defect in the library rather than a runtime condition, hence not an IpApiError.
    """
