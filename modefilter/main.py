"""ModeFilter API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, exception handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from modefilter.api.embed import router as embed_router
from modefilter.api.fetch import router as fetch_router
from modefilter.api.health import router as health_router
from modefilter.api.middleware import setup_middleware
from modefilter.domain.exceptions import (
    BackendUnavailableError,
    DomainError,
    InvalidTokenError,
    ScopeValidationError,
)
from modefilter.infrastructure.config import settings
from modefilter.infrastructure.database import dispose_engine
from modefilter.infrastructure.logging import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    configure_logging()
    logger.info(
        "Starting ModeFilter API",
        version=settings.api_version,
        debug=settings.debug,
        store_backend=settings.store_backend,
        global_mode=settings.global_mode.value,
    )

    yield

    logger.info("Shutting down ModeFilter API")
    if settings.store_backend == "sql":
        await dispose_engine()


app = FastAPI(
    title="ModeFilter API",
    description="Mode-aware product listing engine for storefront widgets",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS sits innermost so preflights pass the embed key guard
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID, embed key and error middleware
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(fetch_router)
app.include_router(embed_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


DOMAIN_ERROR_STATUS: dict[type[DomainError], int] = {
    ScopeValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    BackendUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: list[dict[str, str | None]] | None = None,
) -> JSONResponse:
    """Build the standard error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": getattr(request.state, "request_id", None),
        },
    )


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to their status codes.

    Backend and token diagnostics are logged, never returned.
    """
    status_code = next(
        (code for cls, code in DOMAIN_ERROR_STATUS.items() if isinstance(exc, cls)),
        status.HTTP_400_BAD_REQUEST,
    )

    details: list[dict[str, str | None]] = []
    if isinstance(exc, ScopeValidationError):
        details = [{"field": exc.field, "message": exc.reason}]
    elif isinstance(exc, BackendUnavailableError):
        logger.error(
            "Backend unavailable",
            path=request.url.path,
            backend=exc.backend,
            reason=exc.reason,
        )
    elif isinstance(exc, InvalidTokenError):
        logger.warning("Fetch token rejected", path=request.url.path, reason=exc.reason)

    return error_response(request, status_code, exc.error_code, exc.message, details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request body validation errors with consistent format."""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body") or None,
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        details,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return error_response(request, exc.status_code, error_code, message, details)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal error occurred",
    )
