"""
Samanvi Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       error mapping and lifecycle management in one place.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance that owns its own Database (engine + session factory).
Who:   uvicorn imports `app.main:app`; tests call create_app() with their
       own Settings pointing at in-memory SQLite.

Application Architecture:
    ┌──────────────────────────────────────────────────────────────┐
    │                         FastAPI App                          │
    │                                                              │
    │  Middleware Chain:                                           │
    │  Rate Limit → Req ID → Logging → Security Headers → GZip → CORS
    │                                                              │
    │  Routes (gate per group, chosen by AUTH_* settings):         │
    │  ┌───────────────┐ ┌──────────────┐ ┌──────────────────────┐ │
    │  │ /api/users    │ │ /api/buses   │ │ /api/documents       │ │
    │  │ (open)        │ │ (api key)    │ │ (api key)            │ │
    │  └───────────────┘ └──────────────┘ └──────────────────────┘ │
    │  ┌───────────────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │/api/document-types│ │/api/dashboard   │ │ /health      │  │
    │  │ (api key)         │ │ (basic)         │ │ (open)       │  │
    │  └───────────────────┘ └─────────────────┘ └──────────────┘  │
    │                                                              │
    │  Exception Handlers: every error → {message, error, ...}     │
    └──────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (missing gate secrets are logged loudly)
    3. Log startup complete

    Shutdown (after uvicorn has drained in-flight requests, bounded by
    SHUTDOWN_GRACE_PERIOD):
    1. Dispose the database engine (close all pooled connections)
    2. Log shutdown complete
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import Settings
from app.config import settings as default_settings
from app.database import Database
from app.exceptions import (
    RateLimitExceededError,
    SamanviError,
    StoreError,
    ValidationFailedError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.routes import bus_documents, buses, dashboard, document_types, health, users
from app.schemas.common import format_validation_errors
from app.security.gates import build_gate

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    What:    One stdout handler, one format, level from LOG_LEVEL.
    When:    Called once during app startup, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] app.services.bus_service: Bus created ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("Samanvi Backend %s starting up (%s)...", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")
        # Keep serving: /health still answers and gated routes reject everything

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Samanvi Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None) or request_id_var.get("") or None


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError / ValidationFailedError → 400 "Validation error" + details
        DuplicateRecordError                          → 409 "Resource already exists"
        RecordNotFoundError                           → 404 "Resource not found"
        ConstraintViolationError                      → 400 "Database operation failed"
        NotFoundError / ConflictError                 → 404 / 409 with the service's message
        UnauthorizedError / ForbiddenError            → 401 / 403 with the gate's message
        RateLimitExceededError                        → 429 + Retry-After
        unknown route / method                        → 404 "Route not found" / 405
        SQLAlchemyError, anything else                → 500 "Internal Server Error"

    Body: {message, error, details?, request_id, stack?}
        `stack` is only added outside production. Driver messages, SQL and
        constraint names never reach the client; they go to the server log.
    """

    def respond(
        request: Request,
        status_code: int,
        code: str,
        message: str,
        exc: BaseException,
        details: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        content: Dict[str, Any] = {
            "message": message,
            "error": code,
            "request_id": _request_id(request),
        }
        if details is not None:
            content["details"] = details
        if not settings.is_production:
            content["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )

        log_level = logging.ERROR if status_code >= 500 else logging.WARNING
        logger.log(
            log_level,
            "[%s] %d %s on %s %s from %s",
            content["request_id"],
            status_code,
            message,
            request.method,
            request.url.path,
            _client_ip(request),
            exc_info=exc if status_code >= 500 else None,
        )
        return JSONResponse(status_code=status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """FastAPI rejected the path, query or body; report every offending field."""
        return respond(
            request, 400, ValidationFailedError.code, "Validation error", exc,
            details=format_validation_errors(exc.errors()),
        )

    @app.exception_handler(ValidationFailedError)
    async def handle_validation_failed(request: Request, exc: ValidationFailedError):
        return respond(
            request, exc.status_code, exc.code, exc.message, exc,
            details=format_validation_errors(exc.errors),
        )

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return respond(
            request, exc.status_code, exc.code, exc.message, exc,
            details={"retry_after": exc.retry_after},
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        """Store-level failure: generic message out, driver detail to the log only."""
        if exc.context:
            logger.info("[%s] Store error context: %s", _request_id(request), exc.context)
        return respond(request, exc.status_code, exc.code, exc.message, exc)

    @app.exception_handler(SamanviError)
    async def handle_app_error(request: Request, exc: SamanviError):
        """NotFound / Conflict / Unauthorized / Forbidden carry a client-safe message."""
        return respond(request, exc.status_code, exc.code, exc.message, exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return respond(request, 404, "not_found", "Route not found", exc)
        if exc.status_code == 405:
            return respond(
                request, 405, "method_not_allowed", str(exc.detail), exc,
                headers=getattr(exc, "headers", None),
            )
        return respond(
            request, exc.status_code, "http_error", str(exc.detail), exc,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        return respond(request, 500, "internal_server_error", "Internal Server Error", exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: never leak internals, always hand back a request ID."""
        return respond(request, 500, "internal_server_error", "Internal Server Error", exc)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to build against. Defaults to the
                  environment-loaded settings; tests pass their own.

    The app owns one Database, created here and disposed by the lifespan.
    Handlers reach it through `request.app.state.database`.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Samanvi API",
        description=(
            "Fleet compliance backend: buses, their regulatory documents and "
            "expiry tracking, plus voice-app user accounts."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added runs first).

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )

    # Don't compress small responses (overhead > savings)
    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window,
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app, settings)

    # ── Register Routes ───────────────────────────────────────────────────
    def gated(policy):
        return [Depends(build_gate(policy, settings))]

    app.include_router(users.router)
    # Before buses: /api/buses/missing-required must win over /api/buses/{bus_id}
    app.include_router(bus_documents.router, dependencies=gated(settings.auth_documents))
    app.include_router(buses.router, dependencies=gated(settings.auth_buses))
    app.include_router(document_types.router, dependencies=gated(settings.auth_document_types))
    app.include_router(dashboard.router, dependencies=gated(settings.auth_dashboard))
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()
