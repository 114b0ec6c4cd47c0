"""
Person Registry - Main FastAPI Application

HTTP surface of the cached person service:
- Backend wiring from environment settings at startup
- Service errors mapped to HTTP status codes
- Health endpoint covering store and cache
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from .api.endpoints.persons import router as persons_router
from .container import build_container
from .core.config import get_settings
from .core.logging_config import configure_logging
from .dao import UpdateNotFound
from .service import (
    InvalidRequest,
    ServiceError,
    ServiceUnavailable,
    TransactionFailed,
)

logger = structlog.get_logger()
settings = get_settings()
configure_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the container on startup and release it on shutdown."""
    logger.info("Starting Person Registry API", environment=settings.ENVIRONMENT)

    container = build_container(settings)
    await container.initialize()
    app.state.container = container

    try:
        yield
    finally:
        logger.info("Shutting down Person Registry API")
        await container.aclose()


app = FastAPI(
    title="Person Registry API",
    description="Person registry with a cache-aside read path",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(persons_router, prefix="/api/v1", tags=["persons"])


def status_code_for(exc: ServiceError) -> int:
    if isinstance(exc, InvalidRequest):
        return 400
    if isinstance(exc, TransactionFailed):
        if isinstance(exc.usecase_error.cause, UpdateNotFound):
            return 404
        return 409
    if isinstance(exc, ServiceUnavailable):
        return 503
    return 500


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    status_code = status_code_for(exc)
    log_method = logger.error if status_code >= 500 else logger.warning
    log_method(
        "Service error",
        path=request.url.path,
        method=request.method,
        error=exc.message,
        error_code=exc.error_code,
        status_code=status_code,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


@app.get("/health")
async def health_check(request: Request):
    """Health of the store and the cache."""
    health = await request.app.state.container.health_check()
    status_code = 200 if health["status"] == "healthy" else 503
    return JSONResponse(status_code=status_code, content=health)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
