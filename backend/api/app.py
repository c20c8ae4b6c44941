"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from modules.debates.routes import router as debates_router
from shared.config import get_settings
from shared.exceptions import ValidationError
from shared.logging import configure_logging

from .middleware.request_context import RequestContextMiddleware
from .models.errors import INVALID_PAYLOAD
from .routes import health, samples

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; debate requests will be refused")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies get a fixed 400 without validation detail."""
    logger.warning(f"request.validation_failed path={request.url.path} errors={len(exc.errors())}")
    return JSONResponse(status_code=400, content=INVALID_PAYLOAD.model_dump())


async def tribunal_validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Checks that depend on settings answer with the same fixed 400."""
    logger.warning(f"request.validation_failed path={request.url.path} reason={exc.message!r}")
    return JSONResponse(status_code=400, content=INVALID_PAYLOAD.model_dump())


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Jury-style multi-agent LLM debate API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        expose_headers=["X-Request-Id", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ValidationError, tribunal_validation_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(samples.router, prefix="/api", tags=["samples"])
    app.include_router(debates_router, prefix="/api/debate", tags=["debate"])

    return app


# Application instance for uvicorn
app = create_app()
