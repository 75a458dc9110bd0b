"""FastAPI application for the launchpad.

Note: Caller authentication is not implemented at the application level.
The host in front of this service authenticates the caller and forwards
the identity in the X-Caller header.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from launchpad import __version__
from launchpad.api.endpoints import router
from launchpad.errors import CurveError
from launchpad.models.wire import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("LAUNCHPAD_HOST", "0.0.0.0")
PORT = int(os.environ.get("LAUNCHPAD_PORT", "8000"))
DEBUG = os.environ.get("LAUNCHPAD_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (64 KB)
MAX_REQUEST_SIZE = 64 * 1024

# HTTP status per error category
STATUS_BY_CATEGORY = {
    "validation": 400,
    "authorization": 403,
    "not_found": 404,
    "state": 409,
    "economic": 422,
    "arithmetic": 422,
}

app = FastAPI(
    title="Bonding Curve Launchpad",
    description="Constant-product token launchpad with graduation and migration",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(CurveError)
async def curve_error_handler(request: Request, exc: CurveError) -> JSONResponse:
    """Map launchpad errors to a status code by category."""
    status = STATUS_BY_CATEGORY.get(exc.category, 400)
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        category=exc.category,
        status=status,
    )
    body = ErrorResponse(error=type(exc).__name__, category=exc.category, detail=str(exc))
    return JSONResponse(status_code=status, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the launchpad API server.

    Configuration via environment variables:
    - LAUNCHPAD_HOST: Host to bind to (default: 0.0.0.0)
    - LAUNCHPAD_PORT: Port to bind to (default: 8000)
    - LAUNCHPAD_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "launchpad.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
