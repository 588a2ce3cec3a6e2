"""Exception handlers that render every error in the response envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    """Build a ``{success: false, message}`` response."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def validation_message(exc: RequestValidationError) -> str:
    """Human-readable message for the first validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request."

    error = errors[0]
    # Messages raised by our own validators are already user-facing
    ctx_error = (error.get("ctx") or {}).get("error")
    if error.get("type") == "value_error" and ctx_error is not None:
        return str(ctx_error)

    field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query"))
    if error.get("type") == "missing":
        return f"Missing required field: {field}." if field else "Request body is required."
    return f"{field}: {error.get('msg')}" if field else str(error.get("msg"))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, validation_message(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred.")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on an application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
