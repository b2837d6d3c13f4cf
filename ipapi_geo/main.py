from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, status
from pydantic import ValidationError

from ipapi_geo.client import IpApi
from ipapi_geo.errors import (
    InvalidIpError,
    IpApiError,
    JsonParseError,
    LookupFailedError,
    MissingFieldError,
    TextEncodingError,
    TransportError,
)
from ipapi_geo.exception_handlers import (
    pydantic_validation_exception_handler,
    unhandled_exception_handler,
)
from ipapi_geo.logger import configure_logging, logger
from ipapi_geo.models.request_models import IPLookupRequest
from ipapi_geo.models.response_models import HealthResponse, IPLookupResponse

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """One IpApi client, and so one connection pool, for the lifetime of the app."""
    async with IpApi() as ip_api:
        app.state.ip_api = ip_api
        yield


app = FastAPI(
    lifespan=lifespan,
    title="IP Geolocation Service",
    version="0.1.0",
    description="HTTP front end for ip-api.com geolocation lookups.",
)
logger.info("Started IP Geolocation Service")


def get_ip_api_client(request: Request) -> IpApi:
    """Dependency returning the IpApi client shared by all requests."""
    return request.app.state.ip_api


app.add_exception_handler(ValidationError, pydantic_validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


def _error_detail(code: str, exc: IpApiError) -> dict[str, str]:
    return {"code": code, "message": str(exc), "stage": exc.stage.value}


@app.get(
    "/health",
    tags=["health"],
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="ok")


@app.get(
    "/v1/ip/lookup",
    response_model=IPLookupResponse,
    status_code=status.HTTP_200_OK,
    tags=["ip"],
    summary="Look up geolocation information for an IP address.",
)
async def ip_lookup(
    request: Request,
    query: Annotated[IPLookupRequest, Depends()],
    ip_api: Annotated[IpApi, Depends(get_ip_api_client)],
) -> IPLookupResponse:
    """Look up geolocation information for `ip`, or for this service's public address if omitted."""
    ip = query.ip
    logger.info(f"Performing IP lookup path={request.url.path} method={request.method} ip={ip}")

    try:
        result = await ip_api.request(ip)
    except InvalidIpError as exc:
        logger.error(f"Invalid IP used for lookup ip={ip} error={exc}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_error_detail("invalid_ip", exc),
        ) from exc
    except LookupFailedError as exc:
        logger.error(f"ip-api.com rejected the lookup ip={ip} error={exc}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_error_detail("lookup_failed", exc),
        ) from exc
    except TransportError as exc:
        logger.exception(f"Transport error during lookup ip={ip} error={exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=_error_detail("upstream_error", exc),
        ) from exc
    except (TextEncodingError, JsonParseError, MissingFieldError) as exc:
        logger.exception(f"Undecodable ip-api.com response ip={ip} stage={exc.stage} error={exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=_error_detail("invalid_upstream_response", exc),
        ) from exc

    return IPLookupResponse.from_result(result)
