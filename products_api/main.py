"""
Products API - FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application.
How:   ``create_app(settings)`` builds the Database client, registers
       middleware, exception handlers and routers, and returns the app.
Who:   uvicorn (``uvicorn products_api.main:app``) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────────┐ ┌─────────────────┐  │
    │  │ Logging  │→│ Origin Guard │→│ CORS            │  │
    │  └──────────┘ └──────────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────┐ ┌─────────┐ ┌──────────────┐  │
    │  │ /api/products/*  │ │ GET /api│ │ GET /api/ping│  │
    │  └──────────────────┘ └─────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Database→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging setup, Database.connect() (failure is logged, not fatal)
    Shutdown: Database.dispose()
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from products_api import __version__
from products_api.config import Settings, settings as default_settings
from products_api.database import Database
from products_api.exceptions import (
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from products_api.middleware.cors import OriginGuardMiddleware
from products_api.middleware.logging import RequestLoggingMiddleware
from products_api.routes import api, products

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the database once at startup and dispose it at shutdown.

    A failed connection does not stop the server: requests keep being
    served and those that touch the database answer 500.
    """
    config: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(config.log_level)
    logger.info("Products API %s starting up...", __version__)

    await database.connect()

    logger.info("Allowed origins: %s", ", ".join(config.allowed_origins) or "none")
    logger.info("API docs: http://%s:%d/docs", config.backend_host, config.backend_port)

    yield

    logger.info("Products API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

        ValidationError         → 400 {"errors": [...]}
        RequestValidationError  → 400 {"errors": [...]}
        NotFoundError           → 404 {"error": "product not found"}
        DatabaseError           → 500 {"error": "Internal server error"}
        Exception               → 500 {"error": "Internal server error"}

    Internal details (SQL, stack traces) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info(
            "Validation failed for %s %s: %s",
            request.method,
            request.url.path,
            "; ".join(error.msg for error in exc.errors),
        )
        return JSONResponse(
            status_code=400,
            content={"errors": [error.to_dict() for error in exc.errors]},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """FastAPI's own parameter validation, reshaped to the API's error list."""
        errors = []
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ())]
            errors.append({
                "type": "field",
                "msg": error.get("msg", "Invalid value"),
                "path": ".".join(loc[1:]),
                "location": loc[0] if loc else "body",
            })
        return JSONResponse(status_code=400, content={"errors": errors})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "Database error on %s %s: %s | Context: %s",
            request.method,
            request.url.path,
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "Unexpected error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config:   Settings to use (defaults to the environment-loaded singleton)
        database: Persistence client; built from ``config.database_url`` when omitted

    Returns:
        FastAPI instance with docs at /docs, /redoc and /openapi.json.
    """
    config = config or default_settings
    database = database or Database(config.database_url, echo=config.log_level == "DEBUG")

    app = FastAPI(
        title="REST API FastAPI / SQLAlchemy",
        description="API Docs for Products",
        version=__version__,
        openapi_tags=[{"name": "Products", "description": "CRUD products"}],
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.database = database

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: Logging → Origin Guard → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(OriginGuardMiddleware, allowed_origins=config.allowed_origins)
    app.add_middleware(RequestLoggingMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(api.router)
    app.include_router(products.router)

    return app


# uvicorn entry point: ``uvicorn products_api.main:app``
app = create_app()
