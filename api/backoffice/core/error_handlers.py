"""
Centralized error handlers for the Backoffice API.

Access failures are answered with the composed access-denied response so
callers always receive a well-formed redirect or ajax body; every other
application error is rendered as a JSON error document.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.responses import Response

from backoffice.context import RequestContext
from backoffice.core.exceptions import BaseAppException

logger = logging.getLogger(__name__)


async def base_exception_handler(
    request: Request, exc: BaseAppException
) -> JSONResponse:
    """Handle all application-specific exceptions.

    Args:
        request: The incoming request that caused the exception
        exc: The application exception that was raised

    Returns:
        JSON response with standardized error format
    """
    logger.error(
        f"Application error: {exc.error_code} - {exc.detail}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.error_code,
                "message": exc.detail,
                "status_code": exc.status_code,
            }
        },
        headers=exc.headers,
    )


async def access_denied_handler(request: Request, exc: BaseAppException) -> Response:
    """Answer access and handler lookup failures with the access-denied flow."""
    services = getattr(request.app.state, "services", None)
    if services is None or getattr(request.state, "session", None) is None:
        return await base_exception_handler(request, exc)

    logger.warning(
        f"Access denied: {exc.error_code} - {exc.detail}",
        extra={"path": request.url.path, "method": request.method},
    )

    ctx = getattr(request.state, "request_context", None)
    if ctx is None:
        ctx = await RequestContext.from_request(request, services.auth_gate)
    return services.composer.access_denied(ctx)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors.

    Args:
        request: The incoming request that caused the exception
        exc: The unhandled exception that was raised

    Returns:
        JSON response with generic error message (no sensitive details)
    """
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
                "status_code": 500,
            }
        },
    )
