"""
Notes API Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       bound to its own Database handle.
Who:   uvicorn (`uvicorn notesapi.main:app` or the `notesapi` console script)
       and the test suite, which builds one app per test database.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────┐ ┌──────────┐ ┌───────────┐  │
    │  │ /api/v1/notes CRUD │ │ /health  │ │ API docs  │  │
    │  └────────────────────┘ └──────────┘ └───────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Database→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

API documentation (generated from the route and schema definitions):
    /api-docs/openapi.json   OpenAPI document
    /swagger-ui              Swagger UI
    /redoc                   ReDoc
    /rapidoc                 RapiDoc

Lifecycle:
    Startup:  configure logging, apply pending migrations
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notesapi import __version__
from notesapi.config import Settings, settings as default_settings
from notesapi.database import Database
from notesapi.exceptions import (
    DatabaseError,
    NotesAPIError,
    NotFoundError,
    ValidationError,
)
from notesapi.middleware.logging import RequestLoggingMiddleware
from notesapi.middleware.request_id import RequestIDMiddleware, request_id_var
from notesapi.migrate import upgrade_database_async
from notesapi.routes import docs, health, notes
from notesapi.schemas.note import UNEXPECTED_ERROR_MESSAGE, error_body

logger = logging.getLogger(__name__)

OPENAPI_URL = "/api-docs/openapi.json"

OPENAPI_TAGS = [
    {"name": "notes", "description": "Note management endpoints."},
    {"name": "health", "description": "Service health and database connectivity."},
]


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,  # Override any existing logging config
    )

    # Our access log replaces uvicorn's; SQL echo only at DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if log_level == "DEBUG" else logging.WARNING
    )
    logging.getLogger("alembic").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Apply pending migrations (RUN_MIGRATIONS_ON_STARTUP)
    Shutdown:
        1. Dispose database engine (close all pooled connections)
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("Notes API %s starting up...", __version__)

    if app_settings.run_migrations_on_startup:
        await upgrade_database_async(app_settings.database_url)

    logger.info(
        "Server ready at http://%s:%d (docs at %s)",
        app_settings.backend_host,
        app_settings.backend_port,
        app.docs_url,
    )

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _field_from_error(error: dict) -> str:
    # ("body", "title") → "title"; ("body",) → "body"; unparsable JSON → "body"
    if error.get("type") == "json_invalid":
        return "body"
    parts = [str(part) for part in error.get("loc", ()) if part != "body"]
    return ".".join(parts) if parts else "body"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400 Bad Request
        NotFoundError                            → 404 Not Found
        DatabaseError                            → 500 (generic message)
        NotesAPIError (base)                     → 500 (catch-all for custom)
        HTTPException (routing)                  → its own status, common shape
        Exception (fallback)                     → 500 (unexpected errors)

    Internal details (stack traces, SQL, driver text) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body/path decoding failures use 400 like every other validation failure."""
        errors = exc.errors()
        first = errors[0] if errors else {"loc": ("body",), "msg": "Invalid request"}
        field = _field_from_error(first)
        message = f"{field}: {first.get('msg', 'invalid value')}"
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), message)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", message, {"field": field}),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=error_body("not_found", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(NotesAPIError)
    async def handle_app_error(request: Request, exc: NotesAPIError):
        logger.error(
            "[%s] Unhandled application error %s: %s | Context: %s",
            request_id_var.get(""),
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Unknown routes and disallowed methods, in the common error shape."""
        error = "not_found" if exc.status_code == 404 else "http_error"
        message = "not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(error, message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,  # Log full stack trace for debugging
        )
        return JSONResponse(
            status_code=500,
            content=error_body("internal_server_error", UNEXPECTED_ERROR_MESSAGE),
        )


# ══════════════════════════════════════════════════════════════════════════
# OpenAPI Document
# ══════════════════════════════════════════════════════════════════════════

# FastAPI's built-in 422 entries; request validation answers 400 here
_UNUSED_VALIDATION_SCHEMAS = ("HTTPValidationError", "ValidationError")


def install_openapi(app: FastAPI) -> None:
    """
    Replace app.openapi with a generator whose document matches the
    statuses the handlers actually return (no 422 anywhere).

    The schema is built once and cached in app.openapi_schema.
    """

    def openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
            tags=app.openapi_tags,
        )
        for path_item in schema.get("paths", {}).values():
            for operation in path_item.values():
                if isinstance(operation, dict):
                    operation.get("responses", {}).pop("422", None)

        component_schemas = schema.get("components", {}).get("schemas", {})
        for name in _UNUSED_VALIDATION_SCHEMAS:
            component_schemas.pop(name, None)

        app.openapi_schema = schema
        return schema

    app.openapi = openapi


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the environment-driven
                      module-level `notesapi.config.settings`.

    Returns: Fully configured FastAPI instance with its own Database.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Notes API",
        description="Create, read, update and delete text notes.",
        version=__version__,
        docs_url="/swagger-ui",
        redoc_url="/redoc",
        openapi_url=OPENAPI_URL,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = Database(app_settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition: the last one added
    # (RequestID) sees the request first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(health.router)
    app.include_router(docs.router)

    install_openapi(app)

    return app


def run() -> None:
    """Entry point of the `notesapi` console script."""
    import uvicorn

    uvicorn.run(
        "notesapi.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `notesapi.main:app` to be importable
app = create_app()
