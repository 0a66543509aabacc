"""Mapping of domain errors onto JSON error responses."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from deedsync.domain.errors import (
    DeedSyncError,
    InvalidInput,
    PropertyNotFound,
    RunAlreadyExists,
    RunNotFound,
    StorageError,
    Unauthorized,
)

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

log = getLogger(__name__)

STATUS_BY_ERROR: Final[dict[type[DeedSyncError], int]] = {
    Unauthorized: 401,
    InvalidInput: 400,
    PropertyNotFound: 404,
    RunNotFound: 404,
    RunAlreadyExists: 409,
    StorageError: 500,
}


def status_for_error(exc: DeedSyncError) -> int:
    """Resolve the HTTP status via the error's class hierarchy, defaulting to 500."""

    for cls in type(exc).__mro__:
        status = STATUS_BY_ERROR.get(cls)  # type: ignore[arg-type]
        if status is not None:
            return status
    return 500


def error_response(*, status: int, message: str, code: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(
        status_code=status,
        content={"ok": False, "error": message, "code": code},
        headers=headers,
    )


async def deedsync_error_handler(request: Request, exc: DeedSyncError) -> JSONResponse:
    status = status_for_error(exc)
    if status >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(status=status, message=str(exc), code=type(exc).__name__)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}" if location else message


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    _ = request
    return error_response(
        status=400,
        message=_describe_validation_error(exc),
        code=InvalidInput.__name__,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.exception_handler(DeedSyncError)(deedsync_error_handler)
    app.exception_handler(RequestValidationError)(validation_error_handler)
