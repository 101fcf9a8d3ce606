"""
api/main.py -- FastAPI application factory for the Inventory API.

Run with:  python main.py
           uvicorn asgi:app --reload

create_app(settings) builds a fresh application. Everything process-wide --
Settings, the TokenIssuer, the Mongo client and the repositories -- is built
from that one Settings object and hung on app.state; nothing reads the
environment after startup.

Middleware stack (outermost to innermost):
  1. log_requests       -- one INFO line per request with latency
  2. CORSMiddleware     -- adds CORS headers for allowed browser origins
  3. SlowAPIMiddleware  -- enforces per-route rate limits from api.limiter

Lifespan handles startup (Mongo client, indexes, repositories) and shutdown
(close client) symmetrically.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException

from api.limiter import limiter
from api.models import ErrorResponse
from api.routes.categories import router as categories_router
from api.routes.products import router as products_router
from api.routes.users import router as users_router
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.config import Settings, get_settings
from core.database import create_client, get_database
from core.errors import InventoryError
from inventory.store import InventoryStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("inventory.api")

VERSION = "1.0.0"
ROOT_MESSAGE = "API Server - Inventory App"


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the Mongo client and repositories on startup; close on shutdown.

    The unique email index must exist before the first registration is
    served, so it is created here rather than lazily.
    """
    settings: Settings = app.state.settings
    logger.info("Inventory API starting up")
    client = create_client(settings)
    db = get_database(client, settings)
    app.state.user_store = UserStore(db)
    await app.state.user_store.ensure_indexes()
    app.state.inventory = InventoryStore(db)
    logger.info("Storage initialized")

    yield

    client.close()
    logger.info("Inventory API shutdown complete")


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one line, e.g. "body.title: Field required"."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts) or "Request validation failed."


async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing or malformed request fields are a 400, same as any other validation failure."""
    return _error(400, _describe_validation_errors(exc))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render framework-raised HTTP errors (404 route, 405 method) in the same envelope."""
    response = _error(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with Retry-After when a rate limit is exceeded."""
    retry_after = int(getattr(exc, "retry_after", 60))
    response = _error(429, "Too many requests.")
    response.headers["Retry-After"] = str(retry_after)
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected server errors.

    The raw exception message is echoed to the caller; the traceback is
    logged only.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, str(exc) or type(exc).__name__)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the Inventory API.

    settings defaults to the process-wide get_settings() singleton. Tests pass
    their own Settings and may swap app.router.lifespan_context before the
    client starts.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Inventory API",
        description="User accounts, categories and products backed by MongoDB.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tokens = TokenIssuer.from_settings(settings)

    # SlowAPI looks for app.state.limiter by convention.
    app.state.limiter = limiter

    # Starlette applies the last-added middleware outermost.
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        # Unhandled exceptions propagate through call_next; log them as 500.
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s %d %.1fms %s",
                request.method,
                request.url.path,
                status_code,
                ms,
                request.client.host if request.client else "unknown",
            )

    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(users_router, prefix="/api", tags=["Users"])
    app.include_router(categories_router, prefix="/api", tags=["Categories"])
    app.include_router(products_router, prefix="/api", tags=["Products"])

    @app.get("/", response_class=PlainTextResponse, tags=["Health"])
    async def root() -> str:
        """Liveness probe."""
        return ROOT_MESSAGE

    return app
