"""
Global Exception Handlers for the FastAPI Application.

This module maps exceptions that escape an endpoint onto JSON responses:
- ``ClientInputError`` becomes HTTP 400 ``{"error": ...}``
- anything else becomes HTTP 500 ``{"error": "Internal Server Error", "msg": ...}``
  and is logged with the request context and full traceback
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from joke_api.agents.errors import AgentPlatformError
from joke_api.server.errors import ClientInputError
from joke_api.core.logging_config import get_logger
from joke_api.core.monitoring import log_error
from joke_api.server.schemas import ClientErrorResponse, InternalErrorResponse

logger = get_logger(__name__)


async def client_input_exception_handler(request: Request, exc: ClientInputError) -> JSONResponse:
    """Report missing or invalid caller input as HTTP 400."""
    logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content=ClientErrorResponse(error=str(exc)).model_dump())


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for any unhandled exception in the application.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with the generic error and the exception message
    """
    message = str(exc) or type(exc).__name__

    extra = {
        "method": request.method,
        "path": request.url.path,
        "query_params": dict(request.query_params),
        "client": request.client.host if request.client else "unknown",
        "error_type": type(exc).__name__,
    }
    if isinstance(exc, AgentPlatformError):
        extra["status_code"] = exc.status_code
        extra["details"] = exc.details

    logger.error(
        f"Unhandled error in {request.method} {request.url.path}: {message}",
        exc_info=exc,
        extra=extra,
    )
    log_error(type(exc).__name__, message, {"path": request.url.path})

    return JSONResponse(status_code=500, content=InternalErrorResponse(msg=message).model_dump())


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ClientInputError, client_input_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
