from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from qrmenu.api.middleware.request_id import REQUEST_ID_HEADER, get_request_id
from qrmenu.application.use_cases.auth import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UnauthorizedError,
)
from qrmenu.application.use_cases.categories import CategoryNotFoundError
from qrmenu.application.use_cases.menu_items import MenuItemNotFoundError
from qrmenu.application.use_cases.public_menu import MenuNotFoundError
from qrmenu.application.use_cases.qr_code import UnsupportedQrFormatError
from qrmenu.application.use_cases.restaurants import (
    InvalidSlugError,
    RestaurantNotFoundError,
    SlugAlreadyTakenError,
)
from qrmenu.application.use_cases.upload_image import (
    InvalidUploadError,
    StorageNotConfiguredError,
    StorageUploadError,
)
from qrmenu.infrastructure.observability.otel import current_trace_id

logger = logging.getLogger("qrmenu.api.errors")


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": request_id or get_request_id(),
            "traceId": current_trace_id(),
        },
        headers=headers,
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 401:
        code = "UNAUTHORIZED"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
        headers=getattr(http_exc, "headers", None),
    )


def _field_path(location: tuple[Any, ...]) -> str:
    # drop the "body"/"query"/"path" prefix FastAPI adds
    parts = [str(part) for part in location[1:]] or [str(part) for part in location]
    return ".".join(parts)


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    errors = [
        {
            "field": _field_path(tuple(error.get("loc", ()))),
            "message": str(error.get("msg", "invalid value")),
            "type": str(error.get("type", "value_error")),
        }
        for error in validation_exc.errors()
    ]
    first = errors[0] if errors else {"field": "", "message": "request validation failed"}
    message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message=message,
        details={"errors": errors},
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # runs outside RequestIDMiddleware, after the context variable was reset
    request_id = get_request_id() or getattr(request.state, "request_id", None)
    logger.exception(
        "unhandled_error",
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path, "request_id": request_id},
    )
    return _error_response(
        status_code=500,
        code="INTERNAL_ERROR",
        message="an unexpected error occurred",
        headers={REQUEST_ID_HEADER: request_id} if request_id else None,
        request_id=request_id,
    )


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str]] = [
        (UnauthorizedError, 401, "UNAUTHORIZED"),
        (InvalidCredentialsError, 401, "INVALID_CREDENTIALS"),
        (EmailAlreadyRegisteredError, 400, "EMAIL_ALREADY_REGISTERED"),
        (SlugAlreadyTakenError, 400, "SLUG_ALREADY_TAKEN"),
        (InvalidSlugError, 400, "INVALID_SLUG"),
        (InvalidUploadError, 400, "INVALID_UPLOAD"),
        (UnsupportedQrFormatError, 400, "UNSUPPORTED_QR_FORMAT"),
        (RestaurantNotFoundError, 404, "RESTAURANT_NOT_FOUND"),
        (CategoryNotFoundError, 404, "CATEGORY_NOT_FOUND"),
        (MenuItemNotFoundError, 404, "MENU_ITEM_NOT_FOUND"),
        (MenuNotFoundError, 404, "MENU_NOT_FOUND"),
        (StorageNotConfiguredError, 503, "STORAGE_NOT_CONFIGURED"),
        (StorageUploadError, 500, "STORAGE_UPLOAD_FAILED"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
