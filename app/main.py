"""FastAPI application setup for the weather cache gateway."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from .api import router as api_router
from .errors import QueryValidationError, TransportError, UpstreamError
from .rate_limit import RateLimitMiddleware
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/main")

app = FastAPI(title="Weather Cache Gateway")

app.add_middleware(RateLimitMiddleware)


@app.exception_handler(QueryValidationError)
def handle_validation_error(_request: Request, exc: QueryValidationError):
    """Reject malformed query parameters with every violated rule."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": [v.to_dict() for v in exc.violations]},
    )


@app.exception_handler(UpstreamError)
def handle_upstream_error(_request: Request, exc: UpstreamError):
    """Relay the upstream status code and body text verbatim."""
    logger.info(f"Relaying upstream HTTP {exc.status_code}")
    return PlainTextResponse(content=exc.body, status_code=exc.status_code)


@app.exception_handler(TransportError)
def handle_transport_error(_request: Request, exc: TransportError):
    """Upstream could not be reached."""
    logger.warning(f"Returning 502: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


app.include_router(api_router)
