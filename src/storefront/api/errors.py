"""
storefront.api.errors

Exception handlers rendering every failure into the error envelope.

Responsibilities:
- Map domain `ServiceError`s and `HTTPException`s to `{success: false, error}`.
- Turn request validation failures into 400 with readable messages.
- Hide unexpected errors behind a generic 500 while logging the traceback.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from storefront.errors import ServiceError
from storefront.observability.logging import get_logger

log = get_logger(__name__)


def error_response(status_code: int, error: str | list[str]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def _format_validation_error(err: dict[str, Any]) -> str:
    # Drop the "body"/"query" prefix; keep the field path the client sent.
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    msg = str(err.get("msg", "Invalid value"))
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def service_error_handler(_: Request, exc: ServiceError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [_format_validation_error(e) for e in exc.errors()]
    log.info("request_validation_failed", errors=messages)
    return error_response(HTTP_400_BAD_REQUEST, messages)


async def integrity_error_handler(_: Request, exc: IntegrityError) -> JSONResponse:
    # Races past the service-level uniqueness checks land here.
    log.warning("integrity_error", error=str(exc.orig))
    return error_response(HTTP_400_BAD_REQUEST, "Resource conflicts with existing data")


async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_error", error_type=type(exc).__name__, exc_info=exc)
    return error_response(HTTP_500_INTERNAL_SERVER_ERROR, "Server error")


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
