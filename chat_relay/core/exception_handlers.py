"""Global exception handlers for consistent error responses.

Every failure leaves the service as ``{"error": <message>, "code": <code>,
"request_id": <id>}``:
- ValidationAppError → 400 (rejected input)
- RateLimitAppError → 429 (+ retryAfter / Retry-After for per-client denials)
- LLMAppError → 500 (message already sanitized)
- malformed JSON body → 400
- anything else → generic 500, details only in the logs
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chat_relay.core.config import settings
from chat_relay.core.errors import AppError, LLMAppError, RateLimitAppError
from chat_relay.core.logging import get_request_id

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Invalid request body"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def _status_for(exc: AppError) -> int:
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(exc, LLMAppError):
        return 500
    return 400


def error_body(code: str, message: str) -> dict:
    return {"error": message, "code": code, "request_id": get_request_id()}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the status mapped from the error type.
    """
    status_code = _status_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": status_code,
            "request_path": request.url.path,
        },
    )

    content = error_body(exc.code, exc.message)
    headers: dict[str, str] = {}

    if isinstance(exc, RateLimitAppError) and exc.retry_after is not None:
        content["retryAfter"] = exc.retry_after
        cfg = getattr(request.app.state, "settings", settings)
        if cfg.app.rate_limit_include_headers:
            headers["Retry-After"] = str(exc.retry_after)

    return JSONResponse(status_code=status_code, content=content, headers=headers or None)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unparseable or mistyped bodies as a plain 400."""
    logger.info(
        "request_validation_failed",
        extra={
            "request_path": request.url.path,
            "error_count": len(exc.errors()),
        },
    )
    return JSONResponse(
        status_code=400,
        content=error_body("invalid_request_body", INVALID_BODY_MESSAGE),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    The exception is logged with its type and text; the caller only gets a
    generic message.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=error_body("internal_server_error", INTERNAL_ERROR_MESSAGE),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with a FastAPI app.

    Safe to call more than once; later registrations replace earlier ones.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
