"""
Response envelope and error translation.

Every route answers with ``{"success": true, "data": ...}`` or
``{"success": false, "error": "..."}``. Services keep raising
``HTTPException``; the handlers registered in ``main`` turn those into the
error envelope.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hockey_cms.config import settings

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
NO_ROWS_RETURNED = "PGRST116"

# Public read endpoints are embedded by third-party sites, errors included
PUBLIC_PATH_PREFIX = "/api/public/"
PUBLIC_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def envelope(
    data: Any = None,
    count: Optional[int] = None,
    message: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if count is not None:
        body["count"] = count
    if message:
        body["message"] = message
    body.update(extra)
    return body


def error_body(message: str) -> Dict[str, Any]:
    return {"success": False, "error": message}


def database_error(exc: Exception, conflict_detail: Optional[str] = None) -> HTTPException:
    """Map a PostgREST failure to an HTTPException (unique violations become 409)."""
    if isinstance(exc, APIError) and exc.code == UNIQUE_VIOLATION:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=conflict_detail or "A record with these values already exists.",
        )
    if isinstance(exc, APIError) and exc.code == NO_ROWS_RETURNED:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    message = exc.message if isinstance(exc, APIError) and exc.message else str(exc)
    return HTTPException(status_code=500, detail=f"Database error: {message}")


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Validation failed: " + "; ".join(parts)


def _error_response(request: Request, status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    response_headers = dict(headers or {})
    if request.url.path.startswith(PUBLIC_PATH_PREFIX):
        response_headers.update(PUBLIC_CORS_HEADERS)
    return JSONResponse(
        status_code=status_code,
        content=error_body(message),
        headers=response_headers or None,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(request, exc.status_code, detail, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error_response(request, status.HTTP_400_BAD_REQUEST, _format_validation_errors(exc))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return _error_response(request, 500, "Internal server error")
    return _error_response(request, 500, str(exc))
