"""
Name: FastAPI Exception Handlers

Responsibilities:
  - Convert infrastructure exceptions to RFC 7807 responses
  - Map request body validation failures to INVALID_ARGUMENT
  - Provide an opaque INTERNAL fallback for untyped exceptions

Collaborators:
  - main.py: Registers these handlers
  - exceptions.py: UsersServiceError, DatabaseError
  - error_responses.py: AppHTTPException, app_exception_handler

Constraints:
  - All responses use RFC 7807 Problem Details format
  - Storage details never reach the caller; they are logged with error_id

Notes:
  - Use cases already turn storage failures into INTERNAL results; these
    handlers cover anything that escapes them
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import get_settings
from .error_responses import AppHTTPException, ErrorCode, app_exception_handler
from .exceptions import DatabaseError, UsersServiceError
from .logger import logger


def _request_id_from(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


async def _handle_service_error(
    request: Request, *, exc: UsersServiceError, log_message: str
) -> JSONResponse:
    logger.error(
        log_message,
        extra={
            "error_id": exc.error_id,
            "error_code": exc.error_code,
            "error_message": exc.message,
            "request_id": _request_id_from(request),
        },
    )
    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL,
        detail="Internal error",
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handle database errors with structured response."""
    return await _handle_service_error(request, exc=exc, log_message="Database error")


async def users_service_error_handler(
    request: Request, exc: UsersServiceError
) -> JSONResponse:
    """Handle generic service errors."""
    return await _handle_service_error(request, exc=exc, log_message="Service error")


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request body did not match the RPC message schema."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    app_exc = AppHTTPException(
        status_code=400,
        code=ErrorCode.INVALID_ARGUMENT,
        detail="Invalid request message",
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Fallback for untyped exceptions.

    Full stack trace in the log. The body stays opaque unless
    EXPOSE_INTERNAL_ERRORS is set outside production.
    """
    logger.error(
        "Unhandled exception",
        exc_info=True,
        extra={"request_id": _request_id_from(request), "error": str(exc)},
    )

    detail = str(exc) if get_settings().shows_internal_errors() else "Internal error"
    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL,
        detail=detail or "Internal error",
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Register all exception handlers on the FastAPI app.

    Exception is registered last as the fallback.
    """
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(UsersServiceError, users_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
