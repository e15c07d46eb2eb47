"""Exception handlers that keep every failure inside the JSON envelope."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from temple_hub.core.errors import PersistenceError, TempleHubError

logger = logging.getLogger(__name__)


def _failure(status_code: int, message: str, code: str, **extra: Any) -> JSONResponse:
    payload: dict[str, Any] = {"success": False, "message": message, "error": code}
    payload.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


def register_exception_handlers(app: FastAPI) -> None:
    """Register envelope-producing exception handlers on a FastAPI app."""

    @app.exception_handler(TempleHubError)
    async def _domain_error_handler(request: Request, exc: TempleHubError) -> Response:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_envelope()))

    @app.exception_handler(SQLAlchemyError)
    async def _persistence_error_handler(request: Request, exc: SQLAlchemyError) -> Response:
        raw = str(getattr(exc, "orig", None) or exc)
        logger.exception("Database error on %s %s", request.method, request.url.path)
        error = PersistenceError(meta={"detail": raw})
        return JSONResponse(status_code=error.status_code, content=jsonable_encoder(error.to_envelope()))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        response = _failure(exc.status_code, str(exc.detail), f"http.{exc.status_code}")
        for key, value in (exc.headers or {}).items():
            response.headers[key] = value
        return response

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        return _failure(
            422,
            "Request validation failed",
            "request.validation_error",
            details=exc.errors(),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _failure(500, "Internal Server Error", "internal.unhandled", detail=str(exc))
