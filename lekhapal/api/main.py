"""
FastAPI Application Entry Point
===============================

Main FastAPI application with health check, middleware,
and lifecycle management.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lekhapal import __version__
from lekhapal.config.settings import Settings, get_settings
from lekhapal.db.connection import close_database, init_database
from lekhapal.db.connection import health_check as db_health_check
from lekhapal.services.extraction import GeminiExtractionClient
from lekhapal.utils.errors import LekhapalError
from lekhapal.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def _error_body(error: str, message: str, detail: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": error, "message": message}
    if detail:
        body["detail"] = detail
    return body


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown events for:
    - Database connection pool
    - Extraction API client
    """
    settings: Settings = app.state.settings
    logger.info(
        "lekhapal service starting",
        version=__version__,
        environment=settings.environment,
        port=settings.fastapi_port,
    )

    # Initialize database connection pool
    try:
        await init_database(settings)
        logger.info("Database connection pool initialized")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        # Continue startup - service can work in degraded mode

    app.state.extraction_client = GeminiExtractionClient(settings)
    if not app.state.extraction_client.is_configured:
        logger.warning("GEMINI_API_KEY not set, PDF/image extraction unavailable")

    yield

    # Shutdown: cleanup resources
    logger.info("lekhapal service shutting down")

    try:
        await app.state.extraction_client.close()
    except Exception as e:
        logger.error("Error closing extraction client", error=str(e))

    try:
        await close_database()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error("Error closing database connections", error=str(e))


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    FastAPI application factory.

    Args:
        settings: Application settings (uses default if not provided)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Lekhapal Tables API",
        description=(
            "Turns SHG record books (CSV, spreadsheets, PDFs, photos) into "
            "editable tables. Handles local parsing, generative-AI extraction, "
            "table editing and CSV export."
        ),
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )

    # -------------------------------------------------------------------------
    # Request Logging Middleware
    # -------------------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next: Any) -> Any:
        """
        Log all incoming requests with timing and correlation ID.

        Adds X-Request-ID header for tracing and X-Process-Time header
        with request duration in seconds.
        """
        request_id = str(uuid4())
        start_time = time.perf_counter()

        logger.info(
            "Request received",
            request_id=request_id,
            method=request.method,
            path=str(request.url.path),
            query=str(request.query_params) if request.query_params else None,
            client_ip=request.client.host if request.client else None,
            content_length=request.headers.get("content-length"),
        )

        response = await call_next(request)

        process_time = time.perf_counter() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        logger.info(
            "Request completed",
            request_id=request_id,
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            duration_ms=round(process_time * 1000, 2),
        )

        return response

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(LekhapalError)
    async def lekhapal_error_handler(request: Request, exc: LekhapalError) -> JSONResponse:
        """Handle application-specific errors."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "Application error",
            error_type=type(exc).__name__,
            message=exc.message,
            details=exc.details,
            path=str(request.url),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(
                _error_body(type(exc).__name__, exc.message, exc.details)
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request bodies are client errors (400)."""
        logger.warning("Request validation failed", path=str(request.url), errors=len(exc.errors()))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(
                _error_body("ValidationError", "Invalid request", {"errors": exc.errors()})
            ),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected errors."""
        logger.exception(
            "Unexpected error",
            error_type=type(exc).__name__,
            message=str(exc),
            path=str(request.url),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("InternalServerError", "An unexpected error occurred"),
        )

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check endpoint",
        response_model=dict[str, Any],
    )
    async def health_check(request: Request) -> dict[str, Any]:
        """
        Check service health status.

        Returns health status of the service and its dependencies:
        - Database connectivity
        - Extraction API key presence
        """
        health_status: dict[str, Any] = {
            "status": "healthy",
            "version": __version__,
            "service": "lekhapal",
            "checks": {},
        }

        db_status = await db_health_check()
        health_status["checks"]["database"] = db_status
        if db_status.get("status") != "healthy":
            health_status["status"] = "degraded"

        client = getattr(request.app.state, "extraction_client", None)
        if client is not None and client.is_configured:
            health_status["checks"]["extraction"] = {"status": "configured", "model": client.model}
        else:
            health_status["checks"]["extraction"] = {"status": "not_configured"}
            health_status["status"] = "degraded"

        return health_status

    # -------------------------------------------------------------------------
    # API Info Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/",
        tags=["Info"],
        summary="API information",
    )
    async def api_info() -> dict[str, str]:
        """Return basic API information."""
        return {
            "service": "lekhapal",
            "version": __version__,
            "description": "SHG record book table extraction and editing",
            "docs": "/docs",
        }

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    from lekhapal.api.routes import documents_router, tables_router, upload_router

    app.include_router(upload_router, prefix="/upload", tags=["Upload"])
    app.include_router(tables_router, prefix="/table", tags=["Tables"])
    app.include_router(documents_router, prefix="/shg", tags=["SHG Documents"])

    return app


# Create application instance
app = create_app()
