from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type
from uuid import uuid4

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from registry_api.core.logging import configure_logging, correlation_id_var
from registry_api.core.settings import AppSettings, get_app_settings
from registry_api.db.config import Settings as DbSettings, get_settings as get_db_settings
from registry_api.db.run_migrations import main as run_alembic
from registry_api.db.seed import seed_all
from registry_api.db.session import build_engine, build_session_maker, create_schema, is_memory_sqlite
from registry_api.schemas.common import ErrorInfo, ErrorResponse, MessageResponse
from registry_api.services import errors
from registry_api.services.registry import Registry

# Routers
from registry_api.api.routes.access import router as access_router
from registry_api.api.routes.inventory import router as inventory_router
from registry_api.api.routes.operations import router as operations_router
from registry_api.api.routes.resources import router as resources_router

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Access", "description": "Registry owner, permission grants and checks."},
    {"name": "Inventory", "description": "Lots, locations, items and item components."},
    {"name": "Operations", "description": "Services, processes and their lifecycles."},
    {"name": "Resources", "description": "Notes, generic reads, counts and note attachment."},
]

ERROR_STATUS: Dict[Type[errors.RegistryError], int] = {
    errors.NotOwner: 403,
    errors.NoPermission: 403,
    errors.StringTooLong: 422,
    errors.NotFound: 404,
    errors.ExceedsLimit: 409,
    errors.InvalidStatus: 409,
    errors.InvalidLocation: 422,
    errors.InvalidResourceKind: 422,
    errors.NotInitialized: 409,
    errors.AlreadyInitialized: 409,
}


def _build_error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Build a standardized ErrorResponse JSONResponse."""
    ts = datetime.now(tz=timezone.utc)
    err = ErrorResponse(
        status=status_code,
        error=ErrorInfo(type=error_type, message=message, details=details),
        correlation_id=getattr(request.state, "correlation_id", None),
        caller=getattr(request.state, "caller", None),
        path=request.url.path,
        method=request.method,
        timestamp=ts,
    )
    return JSONResponse(status_code=status_code, content=err.model_dump(mode="json"))


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(errors.RegistryError)
    async def registry_error_handler(request: Request, exc: errors.RegistryError):
        """Map registry rejections to HTTP status codes using the standard envelope."""
        return _build_error_response(
            request=request,
            status_code=ERROR_STATUS.get(type(exc), 400),
            error_type=exc.code,
            message=exc.message,
            details=exc.details,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """
        Global handler for HTTPException to produce a standardized error envelope.
        """
        detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
        return _build_error_response(
            request=request,
            status_code=exc.status_code,
            error_type="http_error",
            message=str(detail),
            details=None if isinstance(exc.detail, str) else exc.detail,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Global handler for request validation errors with a standard structure.
        """
        return _build_error_response(
            request=request,
            status_code=422,
            error_type="validation_error",
            message="Request validation failed",
            details=exc.errors(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """
        Catch-all handler to avoid leaking stack traces and to return a structured error.
        """
        logger.exception("Unhandled error processing request")
        return _build_error_response(
            request=request,
            status_code=500,
            error_type="internal_error",
            message="An unexpected error occurred",
            details=None,
        )


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[AppSettings] = None,
    db_settings: Optional[DbSettings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The registry is created at startup: the schema is migrated (or created), the
    Registry is bound to a fresh engine, and, when REGISTRY_OWNER is configured,
    initialized with that owner.
    """
    settings = settings or get_app_settings()
    db_settings = db_settings or get_db_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings

    # CORS - avoid wildcard with credentials
    cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
    if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
        logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
        cors_allow_credentials = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=cors_allow_credentials,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """
        Enrich request context with a correlation_id for logging and error responses.
        Adds 'X-Correlation-ID' to every response.
        """
        corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
        token_corr = correlation_id_var.set(corr)
        request.state.correlation_id = corr

        logger.info("Incoming request %s %s", request.method, request.url.path)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token_corr)

        response.headers["X-Correlation-ID"] = corr
        return response

    _register_exception_handlers(app)

    @app.on_event("startup")
    async def on_startup() -> None:
        """
        Prepare the schema, build the registry and bootstrap its owner.
        """
        url = db_settings.async_database_url
        migrated = False
        if settings.RUN_MIGRATIONS_ON_STARTUP and is_memory_sqlite(url):
            # Alembic would open its own connection and migrate a separate in-memory database.
            logger.warning("Skipping Alembic migrations for in-memory SQLite; creating schema directly.")
        elif settings.RUN_MIGRATIONS_ON_STARTUP:
            try:
                logger.info("Running Alembic migrations: upgrade head")
                # env.py drives its own event loop, so keep it off this one.
                await asyncio.to_thread(run_alembic, ["upgrade", "head"], db_settings.sync_database_url)
                migrated = True
                logger.info("Migrations completed.")
            except Exception as exc:
                logger.exception("Migration step failed, falling back to create_all: %s", exc)

        engine = build_engine(url, echo=db_settings.SQL_ECHO)
        if not migrated:
            await create_schema(engine)

        registry = Registry.from_settings(build_session_maker(engine), settings)
        app.state.engine = engine
        app.state.registry = registry

        if settings.REGISTRY_OWNER:
            await seed_all(registry, settings.REGISTRY_OWNER, demo=settings.AUTO_SEED)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        engine = getattr(app.state, "engine", None)
        if engine is not None:
            await engine.dispose()

    # Build API v1 router and include sub-routers
    api_v1 = APIRouter(prefix="/api/v1")

    # PUBLIC_INTERFACE
    @api_v1.get(
        "/health",
        response_model=MessageResponse,
        summary="Health Check",
        tags=["Health"],
    )
    def health_check() -> MessageResponse:
        """
        Basic liveness health check endpoint.

        Returns:
            MessageResponse: Simple confirmation that the service is running.
        """
        return MessageResponse(message="Healthy")

    api_v1.include_router(access_router)
    api_v1.include_router(inventory_router)
    api_v1.include_router(operations_router)
    api_v1.include_router(resources_router)

    app.include_router(api_v1)
    return app


# Configure structured logging once at import
configure_logging(get_app_settings().LOG_LEVEL)

app = create_app()
