"""API middleware for the Storefront API.

Request IDs are bound into the structlog context for the duration of a
request. Catalog writes require the admin key; reads are public.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.api.errors import error_response
from storefront.infrastructure.config import settings

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Non-read methods under these prefixes are admin writes.
PROTECTED_PREFIXES = ("/api/",)
READ_METHODS = {"GET", "HEAD", "OPTIONS"}


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlate a request, its log lines and its response by ID."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _is_admin_write(request: Request) -> bool:
    return request.method not in READ_METHODS and request.url.path.startswith(
        PROTECTED_PREFIXES
    )


class AdminKeyMiddleware(BaseHTTPMiddleware):
    """Require ``Authorization: Bearer <admin key>`` on catalog writes."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Reject admin writes that do not carry the configured key.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Downstream response, or a 401 error envelope.
        """
        if not _is_admin_write(request):
            return await call_next(request)

        log = logger.bind(path=request.url.path, method=request.method)
        request_id = getattr(request.state, "request_id", None)
        scheme, _, key = (request.headers.get("Authorization") or "").partition(" ")

        if not scheme:
            log.warning("Missing authorization header")
            error_code, message = "UNAUTHORIZED", "Missing Authorization header"
        elif scheme.lower() != "bearer" or not key:
            log.warning("Invalid authorization format")
            error_code = "UNAUTHORIZED"
            message = "Invalid Authorization header format. Use 'Bearer <api_key>'"
        elif key != settings.admin_api_key:
            log.warning("Invalid admin key")
            error_code, message = "INVALID_API_KEY", "Invalid API key"
        else:
            request.state.is_admin = True
            return await call_next(request)

        return error_response(
            status.HTTP_401_UNAUTHORIZED,
            error_code,
            message,
            request_id=request_id,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Render exceptions escaping the route handlers as 500 envelopes."""

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
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
                request_id=getattr(request.state, "request_id", None),
            )


def setup_middleware(app: FastAPI) -> None:
    """Install middleware; the last one added runs first.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(AdminKeyMiddleware)
    # Outermost, so even 401s and 500s carry the request ID
    app.add_middleware(RequestIdMiddleware)
