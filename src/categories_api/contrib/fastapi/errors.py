"""Map category exceptions to HTTP responses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse

from ...exceptions import (
    CategoriesError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
    ValidationError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

_STATUS: tuple[tuple[type[CategoriesError], int], ...] = (
    (UnauthorizedError, 401),
    (NotFoundError, 404),
    (ValidationError, 400),
    (PersistenceError, 503),
)


def status_for(exc: CategoriesError) -> int:
    for exc_type, status in _STATUS:
        if isinstance(exc, exc_type):
            return status
    return 500


def error_body(exc: CategoriesError, status: int) -> dict[str, object]:
    message = getattr(exc, "message", None) or str(exc)
    body: dict[str, object] = {"code": status, "message": message}
    if isinstance(exc, ValidationError) and exc.errors:
        body["errors"] = exc.errors
    return {"error": body}


async def categories_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, CategoriesError)
    status = status_for(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content=error_body(exc, status))


def install_exception_handlers(app: FastAPI) -> None:
    """Register the handler for every ``CategoriesError``."""
    app.add_exception_handler(CategoriesError, categories_error_handler)


__all__: list[str] = [
    "categories_error_handler",
    "error_body",
    "install_exception_handlers",
    "status_for",
]
