"""
Printful Proxy - FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn printful_proxy.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────┐ ┌──────────┐ ┌───────────┐  │
    │  │ GET/POST/DELETE    │ │ GET /pod │ │GET /health│  │
    │  │ /api/printful      │ │          │ │           │  │
    │  └────────────────────┘ └──────────┘ └───────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ValidationError→400 │ UpstreamError→500      │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Every error body has the shape {"error": "<message>"}.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from printful_proxy import __version__
from printful_proxy.config import settings
from printful_proxy.exceptions import PrintfulProxyError, UpstreamError, ValidationError
from printful_proxy.middleware.logging import RequestLoggingMiddleware
from printful_proxy.middleware.request_id import RequestIDMiddleware, request_id_var
from printful_proxy.routes import health, pod, printful
from printful_proxy.services.printful_client import printful_client

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure process-wide logging once, at startup.

    Format: 2025-12-22T23:05:00 [INFO] printful_proxy.access: GET /api/printful ...
    Level comes from LOG_LEVEL; modules log through logging.getLogger(__name__).
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's own access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # httpx logs every upstream request at INFO
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  configure logging, report configuration problems.
    Shutdown: close the Printful connection pool.
    """
    setup_logging()
    logger.info("Printful Proxy %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /pod, /health and the capability listing work without a token,
        # and upstream calls report the missing key as an error.
        logger.error("Configuration error: %s", str(e))

    logger.info("Printful API: %s", settings.printful_base_url)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Printful Proxy shutting down...")
    await printful_client.aclose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes.

    Handler hierarchy:
        ValidationError         → 400 (caller can fix the input)
        RequestValidationError  → 400 (FastAPI parameter parsing)
        UpstreamError           → 500 (Printful call failed, message passed through)
        PrintfulProxyError      → 500 (catch-all for custom errors)
        Exception               → 500 (unexpected errors)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            loc = first.get("loc") or ()
            field = loc[-1] if loc else "request"
            message = f"Invalid value for '{field}': {first.get('msg', 'invalid')}"
        logger.warning("[%s] Request validation error: %s", rid, message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Printful %s error: %s | Context: %s",
            rid,
            request.method,
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(PrintfulProxyError)
    async def handle_proxy_error(request: Request, exc: PrintfulProxyError):
        rid = request_id_var.get("")
        logger.error("[%s] Proxy error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) or "An unexpected error occurred"},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Printful Proxy API",
        description=(
            "Thin proxy between a web frontend and the Printful print-on-demand API. "
            "Browse the catalog, create products and mockups, quote shipping and costs, "
            "and create or cancel orders."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    # Catalog listings run to several hundred KB
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(printful.router)
    app.include_router(pod.router)
    app.include_router(health.router)

    return app


# uvicorn expects `printful_proxy.main:app` to be importable
app = create_app()
