"""
Exception handlers for failures that are not business outcomes:
request validation, framework HTTP errors and anything unexpected.
All of them produce the standard error body.
"""

from http import HTTPStatus
from typing import Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.responses import error_response
from app.core import errors
from app.core.logging import get_logger

logger = get_logger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header"}

_HTTP_CODES = {
    401: errors.UNAUTHORIZED,
    403: errors.FORBIDDEN,
    404: errors.NOT_FOUND,
    405: errors.METHOD_NOT_ALLOWED,
}


def validation_details(raw_errors: Iterable[dict], location: Optional[str] = None) -> list[dict]:
    """Flatten pydantic errors into ``{location, field, message, type}`` entries."""
    details = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ())]
        where = location
        if where is None and loc and loc[0] in _LOCATION_PREFIXES:
            where, loc = loc[0], loc[1:]
        details.append({
            "location": where,
            "field": ".".join(loc),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        })
    return details


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = validation_details(exc.errors())
    logger.info("request_validation_failed", errors=len(details))
    message = "Invalid query parameters" if any(d["location"] == "query" for d in details) else "Invalid request body"
    return error_response(errors.validation_error(message, details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    try:
        http_status = HTTPStatus(exc.status_code)
    except ValueError:
        http_status = None
    code = _HTTP_CODES.get(exc.status_code) or (http_status.name if http_status else "HTTP_ERROR")
    if isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = http_status.phrase if http_status else "HTTP error"
    return error_response(errors.AppError(exc.status_code, code, message))


async def unhandled_exception_handler(request: Request, exc: Exception):
    # Full detail goes to the log only
    logger.error(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error=str(exc),
        exc_info=exc,
    )
    return error_response(errors.internal_error())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
