"""Exception handlers turning every failure into the Reservo error envelope.

    {"success": false,
     "error": {"code": ..., "message": ..., "request_id": ..., "details": ...},
     "timestamp": ...}

Domain errors keep their message and details. Infrastructure failures and
unhandled exceptions are logged with the request id and answered with a
generic message.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from reservo.core.exceptions import ReservoError, UnavailableError
from reservo.middleware.error_codes import ErrorCode, get_error_code

logger = logging.getLogger("reservo.exception")

UNAVAILABLE_MESSAGE = "A required service is unavailable. Please try again later."
INTERNAL_MESSAGE = "An unexpected error occurred. Please try again later."


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def build_error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    error: dict[str, Any] = {
        "code": code,
        "message": message,
        "request_id": _request_id(request),
    }
    if details:
        error["details"] = details

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        headers=headers,
    )


async def reservo_exception_handler(request: Request, exc: ReservoError) -> JSONResponse:
    if isinstance(exc, UnavailableError):
        logger.error(
            "Dependency unavailable service=%s message=%s request_id=%s",
            exc.service,
            exc.message,
            _request_id(request),
        )
        return build_error_response(request, exc.status_code, exc.code, UNAVAILABLE_MESSAGE)

    return build_error_response(request, exc.status_code, exc.code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Guard rejections and framework errors; WWW-Authenticate survives."""
    if exc.status_code >= 500:
        logger.error(
            "HTTPException status=%s detail=%s request_id=%s",
            exc.status_code,
            exc.detail,
            _request_id(request),
        )

    return build_error_response(
        request,
        exc.status_code,
        get_error_code(exc.status_code).value,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    # "body -> charge -> amount" reads better than the raw location tuple
    return [
        {
            "field": " -> ".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "value_error"),
        }
        for error in exc.errors()
    ]


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return build_error_response(
        request,
        422,
        ErrorCode.VALIDATION_ERROR.value,
        "Validation error: Please check your request data",
        _field_errors(exc),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception request_id=%s path=%s",
        _request_id(request),
        request.url.path,
    )
    return build_error_response(request, 500, ErrorCode.INTERNAL_ERROR.value, INTERNAL_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReservoError, reservo_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
