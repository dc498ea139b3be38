"""FastAPI application for the MailBlocks API.

``create_app`` wires CORS, the health endpoints, the template, design,
preview and upload routers, the exception handlers and the request logging
middleware. The module-level ``app`` is what uvicorn serves.
"""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mailblocks.core.config import Settings, get_settings
from mailblocks.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from mailblocks.infrastructure.api.schemas import InvalidTemplateDetail
from mailblocks.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)
from mailblocks.infrastructure.services.template_publisher import TemplateValidationError

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _service_info(settings: Settings) -> dict[str, str]:
    return {"service": settings.app_name, "version": settings.app_version}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Prepare local image storage and the database, and dispose on shutdown."""
    settings = get_settings()
    configure_logging(settings)
    logger.info("Starting MailBlocks", environment=settings.environment, **_service_info(settings))

    if settings.storage_provider == "local":
        Path(settings.storage_path).mkdir(parents=True, exist_ok=True)
        logger.info("Using local image storage", path=settings.storage_path)

    await init_database()

    yield

    await close_database()
    logger.info("MailBlocks stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application.

    API docs are served only in development.
    """
    settings = get_settings()
    docs = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Email template validation, MJML compilation and design storage",
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        openapi_url="/openapi.json" if docs else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_health_check(app)
    register_routes(app, settings)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    @app.get("/health", tags=["health"])
    async def health_check():
        """Readiness: answers 503 when the design store is unreachable."""
        info = _service_info(get_settings())
        if await get_db_manager().check_connection():
            return {"status": "healthy", "database": "connected", **info}
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "disconnected", **info},
        )

    @app.get("/live", tags=["health"])
    async def liveness_check():
        return {"status": "alive", **_service_info(get_settings())}


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Mount every router under the API prefix."""
    from mailblocks.infrastructure.api.routes import (
        designs_router,
        preview_router,
        templates_router,
        uploads_router,
    )

    mounts = {
        "templates": templates_router,
        "designs": designs_router,
        "preview": preview_router,
        "uploads": uploads_router,
    }
    for segment, router in mounts.items():
        app.include_router(router, prefix=f"{settings.api_prefix}/{segment}")

    @app.get(settings.api_prefix, tags=["root"])
    async def api_root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "api_version": "v1",
            "endpoints": sorted(mounts),
        }


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to responses and hide unexpected ones."""

    @app.exception_handler(TemplateValidationError)
    async def invalid_template_handler(request: Request, exc: TemplateValidationError):
        logger.info(
            "Template rejected by validation",
            path=request.url.path,
            error_count=len(exc.errors),
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": InvalidTemplateDetail(errors=exc.errors).model_dump()},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if get_settings().debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Bind a correlation ID for the request and log its outcome and duration."""
        correlation_id = request.headers.get(CORRELATION_HEADER) or f"cid_{uuid.uuid4().hex[:12]}"
        bind_correlation_id(correlation_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        finally:
            clear_context()


app = create_app()
