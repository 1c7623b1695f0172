"""
Boundary serializer: turns service outcomes into JSON responses.
"""

from typing import Any, Callable

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.errors import AppError
from app.core.outcome import Err, Outcome


def error_response(error: AppError) -> JSONResponse:
    headers = None
    if error.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=error.status_code, content=error.to_body(), headers=headers)


def respond(
    outcome: Outcome[Any],
    render: Callable[[Any], BaseModel],
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Ok -> ``render(value)`` with ``status_code``; Err -> standard error body."""
    if isinstance(outcome, Err):
        return error_response(outcome.error)
    body = render(outcome.value)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


# OpenAPI documentation for the error body
class ErrorDetail(BaseModel):
    code: str
    message: str
    details: list[Any] = []


class ErrorBody(BaseModel):
    error: ErrorDetail


def error_responses(*status_codes: int) -> dict:
    return {code: {"model": ErrorBody} for code in status_codes}


def json_request_body(schema: type[BaseModel]) -> dict:
    """``openapi_extra`` for handlers that read their body with ``parse_body``."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema.model_json_schema()}},
        }
    }
