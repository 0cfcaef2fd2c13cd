"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.config import settings
from app.core.exceptions import AppException, ValidationError
from app.core.logging_config import configure_logging
from app.core.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from app.database import close_db, init_db

logger = logging.getLogger(__name__)

REQUEST_LOCATIONS = ("body", "path", "query")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Debug runs create tables directly; everything else goes through Alembic
    if settings.debug:
        await init_db()
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)

    yield

    await close_db()
    logger.info("%s stopped", settings.app_name)


def validation_errors_to_fields(errors: list[dict]) -> dict[str, str]:
    """Map Pydantic errors to ``{field: message}``, first message per field."""
    fields: dict[str, str] = {}
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part not in REQUEST_LOCATIONS]
        field = str(loc[-1]) if loc else "body"
        if field in fields:
            continue
        ctx_error = error.get("ctx", {}).get("error")
        if error.get("type") == "value_error" and ctx_error is not None:
            fields[field] = str(ctx_error)
        elif error.get("type") == "missing":
            fields[field] = f"{field} is required"
        else:
            fields[field] = error.get("msg", "Invalid value")
    return fields


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Render malformed request bodies like every other validation error."""
        error = ValidationError(validation_errors_to_fields(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_middleware(app: FastAPI) -> None:
    """Install middleware; each one added wraps those added before it."""
    app.add_middleware(SecurityHeadersMiddleware)
    if settings.environment != "development":
        app.add_middleware(RateLimitMiddleware, requests_per_minute=settings.rate_limit_per_minute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="SpotBnB - spots, images and date-range bookings",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    register_middleware(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check() -> dict:
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
    )
