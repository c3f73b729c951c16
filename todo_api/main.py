"""
Todo API — FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes wiring (engine → repository → service), middleware,
       exception handlers, routes and lifecycle management.
How:   `create_app(settings)` returns a configured FastAPI instance. Settings are
       passed in explicitly; when omitted they are loaded once here.
Who:   Called by `python -m todo_api`, by `uvicorn todo_api.main:create_app --factory`
       and by the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   [Request ID] → [Access Logging]      │
    │                                                     │
    │  Routes:       /api/v1/todos…        /health        │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400 │ NotFound→404 │ Database→500      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup (fatal on any failure):
    1. Initialize logging
    2. Verify the database is reachable
    3. Create the schema if enabled
    Shutdown:
    1. Dispose database engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todo_api import __version__
from todo_api.config import Settings, load_settings
from todo_api.database import (
    check_connection,
    create_engine,
    create_session_factory,
    dispose_engine,
    init_schema,
)
from todo_api.exceptions import DatabaseError, NotFoundError, ValidationError
from todo_api.middleware.logging import RequestLoggingMiddleware
from todo_api.middleware.request_id import RequestIDMiddleware, request_id_var
from todo_api.repositories.todo_repository import SQLAlchemyTodoRepository
from todo_api.routes import health, todos
from todo_api.services.todo_service import TodoService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access middleware replaces uvicorn's; SQL echo is opt-in via DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: verify the store and create the schema. Any failure is re-raised,
    which makes uvicorn abort startup instead of serving a broken process.

    Shutdown: dispose the engine.
    """
    settings: Settings = app.state.settings
    engine = app.state.engine

    setup_logging(settings.log_level)
    logger.info("Todo API %s starting up...", __version__)

    try:
        await check_connection(engine)
        logger.info("Database connected successfully")

        if settings.database.create_schema:
            await init_schema(engine)
            logger.info("Database schema initialized")
    except Exception:
        logger.critical("Database startup failed", exc_info=True)
        await dispose_engine(engine)
        raise

    logger.info("Health check: http://%s:%s/health", settings.server.host, settings.server.port)
    logger.info("API endpoint: http://%s:%s/api/v1/todos", settings.server.host, settings.server.port)

    yield

    logger.info("Todo API shutting down...")
    await dispose_engine(engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and error bodies.

    Handler hierarchy:
        RequestValidationError  → 400 (bad path id or body; FastAPI's 422 is not used)
        ValidationError         → 400
        NotFoundError           → 404
        DatabaseError           → 500 (generic message, details logged)
        Exception (fallback)    → 500

    Error bodies never contain stack traces, SQL or driver messages.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Unparseable path id or body that does not match the schema."""
        rid = request_id_var.get("")
        errors = exc.errors()
        if any(err.get("loc", ("",))[0] == "path" for err in errors):
            message = "Invalid todo ID"
        else:
            message = "Invalid request body"
        logger.warning("[%s] %s: %s", rid, message, errors)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": message,
                "request_id": rid,
            },
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
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

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Loaded configuration. When None, settings are read from the
                  dotenv file and environment.

    Returns:
        FastAPI instance with the engine, service and settings attached to
        `app.state`. The engine does not connect until first use.
    """
    if settings is None:
        settings = load_settings()

    engine = create_engine(settings.database, echo=settings.log_level == "DEBUG")
    repository = SQLAlchemyTodoRepository(create_session_factory(engine))

    app = FastAPI(
        title="Todo API",
        description="Create, read, update, delete and toggle todo items.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.todo_service = TodoService(repository)

    # Last added = first to execute
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(todos.router)
    app.include_router(health.router)

    return app
