"""
Exception handlers producing the ErrorResponse envelope.

Data store failures are classified here and nowhere else: services and readers
let driver errors through untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.errors import StoreErrorKind, classify_store_error
from src.schemas.common import ErrorInfo, ErrorResponse

logger = logging.getLogger(__name__)

MIGRATION_HINT = "Run `python -m src.db.run_migrations upgrade head` against the configured database."


# PUBLIC_INTERFACE
def error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    """Wrap an error in the standard envelope, tagged with the request's correlation and tenant ids."""
    body = ErrorResponse(
        status=status_code,
        error=ErrorInfo(type=error_type, message=message, details=details),
        correlation_id=getattr(request.state, "correlation_id", None),
        tenant_id=getattr(request.state, "tenant_id", None),
        path=request.url.path,
        method=request.method,
        timestamp=datetime.now(tz=timezone.utc),
    )
    response = JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
    # Errors handled outside the request middleware still carry the id.
    if body.correlation_id:
        response.headers["X-Correlation-ID"] = body.correlation_id
    return response


async def _on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, str):
        message, details = exc.detail, None
    else:
        message, details = "HTTP Error", exc.detail
    return error_response(request, exc.status_code, "http_error", message, details)


async def _on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(request, 422, "validation_error", "Request validation failed", exc.errors())


async def _on_store_error(request: Request, exc: DBAPIError) -> JSONResponse:
    kind = classify_store_error(exc)
    if kind is StoreErrorKind.SCHEMA_NOT_PROVISIONED:
        logger.error("Database schema missing: %s", exc.orig)
        return error_response(
            request,
            503,
            kind.value,
            "The database tables have not been created yet.",
            {"hint": MIGRATION_HINT},
        )
    logger.exception("Database error while handling request")
    return error_response(
        request,
        500,
        kind.value,
        "There was an error loading data. Check the database connection and try again.",
    )


async def _on_unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error processing request")
    return error_response(request, 500, "internal_error", "An unexpected error occurred")


# PUBLIC_INTERFACE
def install_error_handlers(app: FastAPI) -> None:
    """Register every handler on the app."""
    app.add_exception_handler(StarletteHTTPException, _on_http_error)
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(DBAPIError, _on_store_error)
    app.add_exception_handler(Exception, _on_unhandled)
