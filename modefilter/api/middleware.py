"""HTTP middleware stack for ModeFilter.

Three layers wrap every request, outermost first:

1. ``RequestIdMiddleware`` tags the request with a correlation id and
   logs its outcome.
2. ``EmbedKeyMiddleware`` requires the host API key on the embed
   directive. Fetch requests carry a signed widget token instead and pass
   straight through.
3. ``ErrorHandlerMiddleware`` turns anything that escapes the routers
   into the standard error envelope.
"""

import hmac
import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from modefilter.infrastructure.config import settings

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Only the embed directive is host-facing; everything else is public or
# token-guarded.
PROTECTED_PREFIXES: tuple[str, ...] = ("/embed",)


def envelope(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Error envelope emitted by the middleware layers."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": [],
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlates a request across logs, handlers and the response.

    Widgets send ``<widget_id>-<seq>`` ids so a superseded fetch can be
    told apart from the one that replaced it; other callers get a UUID.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Bind the request id, run the request and log its outcome.

        Args:
            request: Incoming request.
            call_next: Next layer.

        Returns:
            Response carrying the ``X-Request-ID`` header.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code if response is not None else 500,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ============================================================================
# Embed Key Middleware
# ============================================================================


def requires_api_key(request: Request) -> bool:
    """Whether the request targets a host-facing endpoint."""
    if request.method == "OPTIONS":
        return False
    path = request.url.path.rstrip("/")
    return any(path == prefix or path.startswith(prefix + "/") for prefix in PROTECTED_PREFIXES)


class EmbedKeyMiddleware(BaseHTTPMiddleware):
    """Requires ``Authorization: Bearer <api_key>`` on embed calls."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Check the host API key when the path needs one.

        Args:
            request: Incoming request.
            call_next: Next layer.

        Returns:
            The downstream response, or a 401 envelope.
        """
        if not requires_api_key(request):
            return await call_next(request)

        challenge = {"WWW-Authenticate": "Bearer"}
        scheme, _, key = (request.headers.get("Authorization") or "").partition(" ")

        if not scheme:
            logger.warning("Embed call without API key", path=request.url.path)
            return envelope(
                request,
                status.HTTP_401_UNAUTHORIZED,
                "UNAUTHORIZED",
                "Missing Authorization header",
                challenge,
            )

        if scheme.lower() != "bearer" or not key:
            logger.warning("Malformed Authorization header", path=request.url.path)
            return envelope(
                request,
                status.HTTP_401_UNAUTHORIZED,
                "UNAUTHORIZED",
                "Invalid Authorization header format. Use 'Bearer <api_key>'",
                challenge,
            )

        if not hmac.compare_digest(key.encode(), settings.api_key.encode()):
            logger.warning("Embed call with wrong API key", path=request.url.path)
            return envelope(
                request,
                status.HTTP_401_UNAUTHORIZED,
                "INVALID_API_KEY",
                "Invalid API key",
                challenge,
            )

        request.state.authenticated = True
        return await call_next(request)


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last-resort handler for exceptions the routers did not map."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )
            return envelope(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Install the middleware stack.

    Starlette runs the last added middleware first, so layers are added
    innermost first.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(EmbedKeyMiddleware)
    app.add_middleware(RequestIdMiddleware)
