"""Error envelope rendering and domain error mapping."""

from typing import Any

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from storefront.domain.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
)


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the ``{"ok": false, ...}`` error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "ok": False,
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": request_id,
        },
        headers=headers,
    )


def to_http_exception(error: DomainError) -> HTTPException:
    """Convert a domain error into an HTTPException.

    Args:
        error: Domain error raised by a service.

    Returns:
        HTTPException carrying the error code, message and details.
    """
    if isinstance(error, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ConflictError):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_400_BAD_REQUEST

    details = [{"field": key, "message": str(value)} for key, value in error.details.items()]
    return HTTPException(
        status_code=status_code,
        detail={
            "error_code": error.error_code,
            "message": error.message,
            "details": details,
        },
    )
