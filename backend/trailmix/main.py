"""
TrailMix Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers, routers and
       the /uploads static mount; lifespan() owns the database engine.
Who:   Called by uvicorn to start the server (uvicorn trailmix.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  Request ID → Logging → GZip → CORS         │
    │                                                          │
    │  Routes:                                                 │
    │  ┌────────────┐ ┌────────────┐ ┌──────────────────────┐  │
    │  │ /api/users │ │ /api/trails│ │ /api/special-points  │  │
    │  └────────────┘ └────────────┘ └──────────────────────┘  │
    │  ┌───────────────────────────┐ ┌──────────────────────┐  │
    │  │ GET /, /api/test, /health │ │ /uploads (static)    │  │
    │  └───────────────────────────┘ └──────────────────────┘  │
    │                                                          │
    │  Exception Handlers:                                     │
    │  TrailMixError → its status │ RequestValidation → 400    │
    │  Exception → 500                                         │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Create upload directories
    4. Open the pooled engine and session factory on app.state

    Shutdown:
    1. Dispose the engine (close all pooled connections)
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
from fastapi.staticfiles import StaticFiles

from trailmix import __version__
from trailmix.config import settings
from trailmix.database import create_engine, create_session_factory, dispose_engine
from trailmix.exceptions import TrailMixError
from trailmix.middleware.logging import RequestLoggingMiddleware
from trailmix.middleware.request_id import RequestIDMiddleware, request_id_var
from trailmix.routes import health, special_points, trails, users
from trailmix.services.file_service import PUBLIC_PREFIX, file_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once at startup.

    Format: 2024-01-15T12:00:00 [INFO] trailmix.services.trail_service: Trail created: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the database engine on startup and dispose it on shutdown.

    The engine and session factory live on `app.state`, where
    `get_db_session` and the health check pick them up.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("TrailMix Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving; the warning is visible in the startup log
        logger.error("Configuration error: %s", str(e))

    file_service.ensure_directories()
    logger.info("Upload directory: %s", file_service.upload_root)

    app.state.engine = create_engine()
    app.state.session_factory = create_session_factory(app.state.engine)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("TrailMix Backend shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the JSON error body `{error, message, details?, request_id}`.

    Handler hierarchy:
        TrailMixError subclasses → their own status_code / error_code
        RequestValidationError   → 400 validation_error (missing/ill-typed input)
        Exception (fallback)     → 500 internal_server_error
    """

    @app.exception_handler(TrailMixError)
    async def handle_trailmix_error(request: Request, exc: TrailMixError):
        rid = request_id_var.get("")
        content = {
            "error": exc.error_code,
            "message": exc.message,
            "request_id": rid,
        }
        if exc.status_code >= 500:
            # Context may hold driver details; it stays in the logs
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
            if exc.context:
                content["details"] = exc.context
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        details = [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", rid, details)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Invalid request data",
                "details": details,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": str(exc) or "Something went wrong!",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Tests build their own instance and set `app.state.engine` /
    `app.state.session_factory` directly, since the ASGI test transport does
    not run the lifespan.
    """
    app = FastAPI(
        title="TrailMix API",
        description=(
            "Trail-sharing backend: user accounts, trails with photo/video "
            "uploads, and special points of interest along each trail."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Executed in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(trails.router)
    app.include_router(special_points.router)

    # StaticFiles checks the directory at construction time
    file_service.ensure_directories()
    app.mount(
        PUBLIC_PREFIX,
        StaticFiles(directory=str(file_service.upload_root)),
        name="uploads",
    )

    return app


# uvicorn expects `trailmix.main:app`
app = create_app()
