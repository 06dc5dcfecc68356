"""http-curl FastAPI application factory + lifespan lifecycle.

This module implements:
  - create_app() — testable application factory
  - lifespan — @asynccontextmanager startup/shutdown sequence
  - /health router — delegated to httpcurl/health.py
  - /curl, /waiting/{milli} routers — delegated to httpcurl/routes/
  - /        route  — service discovery root
  - app = create_app() — module-level instance for uvicorn

Startup sequence:
  1. load_config()           → app.state.config (read-only from here on)
  2. curl binary lookup      → warning if not on PATH (requests will 500)
  3. app.state.ready = True

Middleware order (Starlette: last added runs first):
  RequestLoggingMiddleware → BodySizeLimitMiddleware → routes
"""

from __future__ import annotations

import os
import shutil
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.routing import APIRouter
from starlette.exceptions import HTTPException as StarletteHTTPException

from httpcurl.config import Config, load_config
from httpcurl.health import router as health_router
from httpcurl.middleware import BodySizeLimitMiddleware, RequestLoggingMiddleware
from httpcurl.routes.curl import router as curl_router
from httpcurl.routes.waiting import router as waiting_router
from httpcurl.utils.logger import configure_logging, get_logger

# ─── Logging Setup ────────────────────────────────────────────────────────────
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if not DEBUG else "DEBUG")
JSON_LOGS = os.getenv("JSON_LOGS", "true").lower() == "true"

configure_logging(log_level=LOG_LEVEL, json_output=JSON_LOGS)
logger = get_logger(__name__)


root_router = APIRouter(tags=["root"])


@root_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint: service identity and discovery."""
    return {
        "service": "http-curl",
        "health": "/health",
        "curl": "/curl",
        "waiting": "/waiting/{milli}",
    }


# ─── Lifespan ─────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown sequence."""
    logger.info("http-curl starting up...")

    # load_config() raises SystemExit on an invalid config file, so the
    # process exits non-zero before ready=True is ever set.
    config: Config = load_config()
    app.state.config = config

    if shutil.which(config.curl.binary) is None:
        logger.warning(
            "curl binary not found on PATH; /curl requests will fail to launch",
            curl_binary=config.curl.binary,
        )

    logger.info(
        "Curl settings",
        curl_binary=config.curl.binary,
        default_timeout_s=config.curl.default_timeout_s,
        print_args=config.curl.print_args,
    )

    app.state.ready = True
    logger.info("http-curl ready", port=config.server.port)

    yield

    logger.info("http-curl shutting down...")
    app.state.ready = False
    logger.info("http-curl shutdown complete")


# ─── Application Factory ──────────────────────────────────────────────────────


def create_app() -> FastAPI:
    """Create and configure the http-curl FastAPI application.

    Call this function directly in tests to get an isolated app instance:
        app = create_app()

    Returns:
        Configured FastAPI application with lifespan, routers, and middleware.
    """
    # Docs expose the full API schema; only served when DEBUG=true.
    _debug = os.getenv("DEBUG", "false").lower() == "true"

    application = FastAPI(
        title="http-curl",
        description="Run curl with an allow-listed set of options over HTTP",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if _debug else None,
        redoc_url="/redoc" if _debug else None,
        openapi_url="/openapi.json" if _debug else None,
    )

    # /health returns 503 for any request that arrives before startup completes.
    application.state.ready = False

    application.add_middleware(BodySizeLimitMiddleware)
    # Registered LAST so it runs FIRST, so 413s are logged with a request id too.
    application.add_middleware(RequestLoggingMiddleware)

    application.include_router(root_router)
    application.include_router(health_router)
    application.include_router(curl_router)
    application.include_router(waiting_router)

    # Registered on Starlette's base class so router 404/405s share the
    # {"error": ...} body shape with handler-raised HTTPExceptions.
    @application.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @application.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=500, content={"error": "Internal server error"}
        )

    return application


# ─── Module-Level App (for uvicorn) ───────────────────────────────────────────

app = create_app()


if __name__ == "__main__":
    from httpcurl.run import main

    main()
