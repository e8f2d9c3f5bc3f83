"""
Exception handlers.

Services raise and propagate; these handlers are the single place where
failures are logged and rendered as the ErrorResponse envelope.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.config.logging import get_logger
from shared.utils.exceptions import AppException
from shared.utils.schemas import ErrorResponse

logger = get_logger("dashboard_api.errors")

# Location prefixes FastAPI puts in front of request validation errors
REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def error_response(
    request: Request,
    status_code: int,
    message: str,
    errors: list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors or None, path=request.url.path)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    log = logger.error if exc.log_level == "error" else logger.warning
    log(
        exc.detail,
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path,
        **exc.log_context,
    )
    return error_response(
        request,
        exc.status_code,
        exc.detail,
        errors=getattr(exc, "fields", None),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        str(exc.detail),
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path,
    )
    return error_response(
        request,
        exc.status_code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = _fields_from_errors(exc.errors())
    logger.warning(
        "Invalid request",
        method=request.method,
        path=request.url.path,
        fields=fields,
    )
    return error_response(request, status.HTTP_400_BAD_REQUEST, "Invalid request", errors=fields)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def _fields_from_errors(errors: Any) -> list[str]:
    fields: list[str] = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        name = ".".join(loc) or "body"
        if name not in fields:
            fields.append(name)
    return fields
