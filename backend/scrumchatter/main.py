"""
Scrum Chatter Backend: FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn scrumchatter.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │  Req ID      │→│  Logging     │→│  CORS       │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /api/teams   │ │ /api/members │ │ /api/dialogs│  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Conflict→409 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create missing tables when DB_AUTO_CREATE is set
    3. Log startup complete

    Shutdown:
    1. Cancel open dialogs
    2. Wait for scheduled store mutations
    3. Dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scrumchatter import __version__
from scrumchatter.config import settings
from scrumchatter.database import dispose_engine, init_models
from scrumchatter.dialogs.registry import dialog_registry
from scrumchatter.exceptions import (
    ConflictError,
    DatabaseError,
    DialogStateError,
    NotFoundError,
    ScrumChatterError,
    ValidationError,
)
from scrumchatter.middleware.logging import RequestLoggingMiddleware
from scrumchatter.middleware.request_id import RequestIDMiddleware, request_id_var
from scrumchatter.routes import dialogs, health, members, teams
from scrumchatter.services.background import background_executor

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    log_format = (
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: startup and shutdown procedures.

    Code before yield runs on startup, code after yield on shutdown.
    Pending member mutations are awaited before the engine goes away, so a
    name submitted just before shutdown still reaches the database.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Scrum Chatter Backend %s starting up...", __version__)

    if settings.db_auto_create:
        await init_models()
        logger.info("Database tables created (DB_AUTO_CREATE)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Scrum Chatter Backend shutting down...")

    dialog_registry.clear()

    if background_executor.pending:
        logger.info("Waiting for %d background job(s)...", background_executor.pending)
    await background_executor.drain()
    logger.info(
        "Background jobs: %d completed, %d failed",
        background_executor.completed_jobs, background_executor.failed_jobs,
    )

    await dispose_engine()

    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError           → 400 Bad Request
        NotFoundError             → 404 Not Found
        DialogStateError          → 409 Conflict (error="dialog_state")
        ConflictError             → 409 Conflict
        DatabaseError             → 500 Internal Server Error
        ScrumChatterError (base)  → 500 Internal Server Error
        Exception (fallback)      → 500 Internal Server Error

    Responses never include stack traces or SQL; those are logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(DialogStateError)
    async def handle_dialog_state(request: Request, exc: DialogStateError):
        """Submit while disabled, or an action on a closed dialog."""
        rid = request_id_var.get("")
        logger.info("[%s] Dialog action rejected: %s", rid, exc.message)
        return JSONResponse(
            status_code=409,
            content={
                "error": "dialog_state",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        rid = request_id_var.get("")
        logger.info("[%s] Conflict: %s", rid, exc.message)
        return JSONResponse(
            status_code=409,
            content={
                "error": "conflict",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Generic message to the client, details logged server-side."""
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(ScrumChatterError)
    async def handle_app_error(request: Request, exc: ScrumChatterError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500 with the request id, stack trace logged."""
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Scrum Chatter API",
        description=(
            "Teams, members and talk-time statistics for scrum meetings, with "
            "member name dialogs that validate uniqueness as the user types."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in reverse order of addition:
    # RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "X-Total-Count",
        ],
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(teams.router)
    app.include_router(members.router)
    app.include_router(dialogs.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
