"""Exception handlers translating domain errors into HTTP responses."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from cat_registry.domain.errors import (
    ConflictError,
    CrudError,
    FieldError,
    ForbiddenError,
    InputValidationError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
)

logger = structlog.get_logger()

STATUS_BY_ERROR: dict[type[CrudError], int] = {
    InputValidationError: status.HTTP_400_BAD_REQUEST,
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Location prefixes FastAPI puts in front of the offending field name.
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie", "form"}


def input_error_from(exc: ValidationError) -> InputValidationError:
    """Convert a pydantic ``ValidationError`` into a domain validation error."""
    return InputValidationError(_field_errors(exc.errors()))


def _field_errors(errors: Sequence[Any]) -> list[FieldError]:
    field_errors = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field_errors.append(FieldError(field=".".join(loc) or "body", message=error.get("msg", "")))
    return field_errors


def _status_for(exc: CrudError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def crud_error_handler(request: Request, exc: CrudError) -> JSONResponse:
    status_code = _status_for(exc)

    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        await logger.aerror(
            "request_failed",
            error_type=type(exc).__name__,
            method=request.method,
            path=request.url.path,
        )
        return JSONResponse(status_code=status_code, content={"detail": "Internal server error"})

    content: dict[str, Any] = {"detail": str(exc)}
    if isinstance(exc, InputValidationError):
        content["errors"] = [{"field": e.field, "message": e.message} for e in exc.errors]

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed requests with 400, listing every failed field."""
    error = InputValidationError(_field_errors(exc.errors()))
    return await crud_error_handler(request, error)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""
    app.add_exception_handler(CrudError, crud_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
