"""Error Handlers: map every failure to the one JSON error envelope.

Invariants:
    - EasterEggsError -> its own http_status and to_response() body; a domain
      ValidationError also names the offending field
    - RequestValidationError -> 400 VALIDATION_ERROR with per-field details
    - Any other exception -> 500 INTERNAL_ERROR, no internal details leaked
    - 4xx log at WARNING, 5xx at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from eastereggs.core.errors import (
    EasterEggsError, ErrorCategory, ErrorSeverity, ValidationError,
)

logger = logging.getLogger(__name__)


def _envelope(
    code: str, message: str, category: ErrorCategory, **extra,
) -> dict:
    severity = ErrorSeverity.CRITICAL if category == ErrorCategory.INTERNAL else ErrorSeverity.ERROR
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


async def _handle_domain_error(request: Request, exc: EasterEggsError) -> JSONResponse:
    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        f"{exc.code} on {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "actor": exc.context.actor,
            "operation": exc.context.operation,
        },
    )
    body = exc.to_response()
    if isinstance(exc, ValidationError):
        body["error"]["field"] = exc.field
    return JSONResponse(status_code=exc.http_status, content=body)


async def _handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected request body on {request.url.path}: {len(details)} error(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, details=details,
        ),
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True, extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred", ErrorCategory.INTERNAL,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EasterEggsError, _handle_domain_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
