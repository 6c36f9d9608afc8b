"""FastAPI application serving zap quotes.

Quotes are pure reads over a caller-supplied pool snapshot, so the app holds
no state. Request throttling belongs to the proxy in front of it.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from zapper import __version__
from zapper.api.endpoints import router
from zapper.errors import ZapError
from zapper.safe_int import SafeIntError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("ZAPPER_HOST", "0.0.0.0")
PORT = int(os.environ.get("ZAPPER_PORT", "8000"))
DEBUG = os.environ.get("ZAPPER_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (default 1 MB; quote requests are tiny)
MAX_REQUEST_SIZE = int(os.environ.get("ZAPPER_MAX_REQUEST_SIZE", str(1024 * 1024)))

app = FastAPI(
    title="Zapper",
    description="Single-sided liquidity quotes for amplified constant-product pools",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


def _unprocessable(event: str, request: Request, exc: Exception) -> JSONResponse:
    error_type = type(exc).__name__
    logger.warning(event, path=request.url.path, error_type=error_type, error=str(exc))
    return JSONResponse(status_code=422, content={"detail": str(exc), "error": error_type})


@app.exception_handler(ZapError)
async def zap_error_handler(request: Request, exc: ZapError) -> JSONResponse:
    """Preconditions and slippage failures are client errors."""
    return _unprocessable("quote_rejected", request, exc)


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    """Arithmetic failures come from degenerate snapshots (zero reserves, oversized values)."""
    return _unprocessable("quote_arithmetic_error", request, exc)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the quote API server.

    Configuration via environment variables:
    - ZAPPER_HOST: Host to bind to (default: 0.0.0.0)
    - ZAPPER_PORT: Port to bind to (default: 8000)
    - ZAPPER_DEBUG: Enable debug/reload mode (default: false)
    - ZAPPER_MAX_REQUEST_SIZE: Maximum request body in bytes (default: 1 MB)
    """
    uvicorn.run(
        "zapper.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
