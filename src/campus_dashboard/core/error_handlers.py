"""Global exception handlers.

Every error leaves the API as ``{"error": "<message>"}`` with the matching
status code. Unhandled exceptions are logged with request context and
reported as a generic 500.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm.exc import NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from campus_dashboard.core.exceptions import RecordNotFoundError, ValidationError

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if first.get("type") in ("missing", "value_error.missing"):
        return "Missing required fields"
    if first.get("type") == "json_invalid":
        return "Invalid request body"
    message = first.get("msg", "Invalid value")
    if location:
        return f"Invalid value for '{'.'.join(location)}': {message}"
    return message


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_error(exc)
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


async def domain_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    message = str(exc) if isinstance(exc, RecordNotFoundError) else "Record not found"
    return JSONResponse(status_code=404, content={"error": message})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unhandled exception and hide its details from the client."""
    logger.error(
        "Unhandled exception in %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, domain_validation_handler)
    app.add_exception_handler(RecordNotFoundError, not_found_handler)
    app.add_exception_handler(NoResultFound, not_found_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
