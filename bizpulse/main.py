"""
FastAPI application factory with middleware, CORS, and request tracing.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bizpulse import __version__
from bizpulse.config import get_settings
from bizpulse.errors import BizPulseError, UnavailableError, ValidationError
from bizpulse.routers import dashboard, metrics, products, system
from bizpulse.storage import build_storage
from bizpulse.utils.logging import configure_logging, get_logger

# Configure logging at module level
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Owns the record store: built on startup, closed on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_startup",
        version=app.version,
        store_backend=settings.store_backend,
        dev_mode=settings.dev_mode,
    )

    app.state.storage = build_storage(settings)

    yield

    storage = getattr(app.state, "storage", None)
    if storage is not None:
        storage.close()
    logger.info("application_shutdown")


async def bizpulse_error_handler(request: Request, exc: BizPulseError) -> JSONResponse:
    """Render domain errors in the standard error envelope."""
    logger.warning(
        "request_rejected",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
    )

    if isinstance(exc, (ValidationError, UnavailableError)):
        content = {"success": False, "error": exc.message}
        if isinstance(exc, ValidationError) and exc.fields:
            content["fields"] = exc.fields
    else:
        content = {"success": False, "error": "Internal server error"}

    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed bodies and bad query parameters as a 400 envelope."""
    fields = []
    for error in exc.errors():
        loc = error.get("loc", ())
        if len(loc) > 1 and isinstance(loc[-1], str) and loc[-1] not in fields:
            fields.append(loc[-1])

    logger.warning(
        "request_invalid",
        path=request.url.path,
        error_types=sorted({e.get("type", "") for e in exc.errors()}),
        fields=fields,
    )

    content = {"success": False, "error": "Invalid request"}
    if fields:
        content["fields"] = fields
    return JSONResponse(status_code=400, content=content)


def create_app() -> FastAPI:
    """
    Application factory.
    Creates and configures FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="BizPulse API",
        description="Business dashboard analytics - insights, summary and recommendations",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_exception_handler(BizPulseError, bizpulse_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Request tracing middleware
    @app.middleware("http")
    async def request_tracing_middleware(request: Request, call_next):
        """Add request ID to all requests and turn uncaught faults into a 500."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )

            return response
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Internal server error",
                    "request_id": request_id,
                },
                headers={"X-Request-ID": request_id},
            )

    @app.get("/health", tags=["System"])
    async def health_check():
        """Liveness probe for load balancers."""
        return {
            "status": "healthy",
            "version": app.version,
        }

    app.include_router(dashboard.router, prefix="/api/v1", tags=["Dashboard"])
    app.include_router(metrics.router, prefix="/api/v1", tags=["Metrics"])
    app.include_router(products.router, prefix="/api/v1", tags=["Products"])
    app.include_router(system.router, prefix="/api/v1/system", tags=["System"])

    logger.info("application_configured", routers_count=4)

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bizpulse.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
