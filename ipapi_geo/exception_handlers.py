from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ipapi_geo.logger import logger


def _get_ip_from_request(request: Request) -> str | None:
    """Raw `ip` query parameter of the incoming request, if any."""
    return request.query_params.get("ip")


def _build_validation_error_payload(exc: ValidationError) -> dict:
    """Reduce validation errors to a stable `code` / `message` pair."""
    code = "invalid_request"
    message = "Invalid request parameters"

    for error in exc.errors():
        loc = error.get("loc", ())
        if len(loc) >= 1 and loc[-1] == "ip":
            code = "invalid_ip"
            message = "The supplied IP address is not a valid IPv4 or IPv6 address."
            break

    return {
        "code": code,
        "message": message,
    }


async def pydantic_validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle Pydantic validation errors raised during dependency resolution."""
    ip = _get_ip_from_request(request)
    logger.info(
        "Pydantic validation error during request handling "
        f"path={request.url.path} method={request.method} ip={ip} errors={exc.errors()}"
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_build_validation_error_payload(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected errors to return a structured 500 response."""
    logger.exception(
        "Unhandled exception while processing request: "
        f"{repr(exc)} path={request.url.path} method={request.method} ip={_get_ip_from_request(request)}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "internal_error",
            "message": "An unexpected error occurred while processing the request.",
        },
    )
