"""
Exception Handlers for the FastAPI Application.

Domain errors (``TelloomError``) become JSON responses with their own status
code. Errors from external services become 502 unless they carry a status
meant for the caller (webhook verification). Anything else is caught by the
global handler, which logs the error ID, request context and full traceback
for debugging purposes.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from telloom.core.errors import TelloomError
from telloom.core.logging_config import get_logger
from telloom.core.monitoring import log_error
from telloom.integrations.errors import IntegrationApiError, WebhookVerificationError

logger = get_logger(__name__)


async def telloom_error_handler(request: Request, exc: TelloomError) -> JSONResponse:
    """
    Translate a domain error into ``{"detail": ...}`` with its status code.

    Extra context attached to the error is merged into the body.
    """
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, **exc.extra})


async def integration_error_handler(request: Request, exc: IntegrationApiError) -> JSONResponse:
    """
    Translate a failed call to an external service.

    The upstream status is not forwarded: the caller sees 502, except for
    webhook verification failures which are the caller's fault.
    """
    if isinstance(exc, WebhookVerificationError):
        logger.warning(f"Rejected webhook on {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.status_code or 400, content={"detail": str(exc)})

    logger.error(
        f"{type(exc).__name__} in {request.method} {request.url.path}: {exc}",
        extra={"upstream_status": exc.status_code, "details": exc.details},
    )
    log_error(type(exc).__name__, str(exc), {"path": request.url.path, "upstream_status": exc.status_code})
    return JSONResponse(status_code=502, content={"detail": str(exc), "error_type": type(exc).__name__})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(TelloomError, telloom_error_handler)
    app.add_exception_handler(IntegrationApiError, integration_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
