"""
Pokedex API — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn pokedex_api.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│ GZip / CORS  │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes (under settings.api_prefix):                │
    │  ┌──────────┐ ┌──────────┐ ┌───────┐ ┌──────────┐   │
    │  │ /pokemon │ │ /items   │ │/moves │ │ /health  │   │
    │  └──────────┘ └──────────┘ └───────┘ └──────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→422 │ NotFound→404 │ Integrity→409 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from pokedex_api import __version__
from pokedex_api.config import settings
from pokedex_api.database import dispose_engine
from pokedex_api.exceptions import (
    DatabaseError,
    IntegrityViolation,
    NotFoundError,
    PokedexError,
    ValidationFailed,
)
from pokedex_api.middleware.logging import RequestLoggingMiddleware
from pokedex_api.middleware.request_id import RequestIDMiddleware, request_id_var
from pokedex_api.routes import health, items, moves, pokemon
from pokedex_api.translation import camelize_errors, internal_name

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup, before anything else logs.
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration check.
    Shutdown: dispose the database engine (close all pooled connections).
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Pokedex API starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    logger.info("API prefix: %s", settings.api_prefix or "/")
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Pokedex API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def request_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """
    FastAPI's own validation errors (bad path ids, non-object bodies)
    reshaped into the field → messages map every 422 uses.
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        field = internal_name(location[-1]) if location else "base"
        errors.setdefault(field, []).append(error.get("msg", "is invalid"))
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """
    Maps exception types to HTTP status codes and response formats.

    Handler hierarchy:
        ValidationFailed        → 422 (field → messages, external field names)
        RequestValidationError  → 422 (same shape)
        NotFoundError           → 404
        IntegrityViolation      → 409
        DatabaseError           → 500 (generic message, details logged)
        PokedexError (base)     → 500
        Exception (fallback)    → 500

    By the time a handler runs, get_db_session has already rolled back.
    """

    def validation_response(errors: Dict[str, List[str]], message: str) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": message,
                "errors": camelize_errors(errors),
                "requestId": request_id_var.get(""),
            },
        )

    @app.exception_handler(ValidationFailed)
    async def handle_validation_failed(request: Request, exc: ValidationFailed):
        logger.warning("[%s] %s: %s", request_id_var.get(""), exc.message, exc.errors)
        return validation_response(exc.errors, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = request_errors(exc)
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), errors)
        return validation_response(errors, "Malformed request")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "requestId": request_id_var.get(""),
            },
        )

    @app.exception_handler(IntegrityViolation)
    async def handle_integrity_violation(request: Request, exc: IntegrityViolation):
        rid = request_id_var.get("")
        logger.warning("[%s] Integrity violation: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=409,
            content={
                "error": "integrity_violation",
                "message": exc.message,
                "requestId": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "requestId": rid,
            },
        )

    @app.exception_handler(PokedexError)
    async def handle_pokedex_error(request: Request, exc: PokedexError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "requestId": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace is logged server-side ONLY (never in the response)."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "requestId": rid,
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
        title="Pokedex API",
        description=(
            "JSON API for a Pokemon catalog: Pokemon, their items and moves. "
            "Requests accept camelCase or snake_case keys; responses are camelCase."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    # Route order: /pokemon/types must be matched before /pokemon/{pokemon_id}
    app.include_router(pokemon.router, prefix=settings.api_prefix)
    app.include_router(items.router, prefix=settings.api_prefix)
    app.include_router(moves.router, prefix=settings.api_prefix)
    # Load balancers hit /health directly, whatever the API prefix
    app.include_router(health.router)

    return app


app = create_app()
