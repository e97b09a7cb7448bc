"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- AppError subclasses → appropriate HTTP status (400, 429, 502)
- Unexpected Exception → generic 500 (safety net)
- Bodies use the flat {"error": "<message>"} shape; the request id travels
  in the X-Request-ID response header
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from chat_gateway.core.errors import AppError, LLMAppError, RateLimitAppError
from chat_gateway.core.logging import get_request_id

logger = logging.getLogger(__name__)


def _status_for(exc: AppError) -> int:
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(exc, LLMAppError):
        return 502
    return 400


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.
    
    Routes domain errors to appropriate HTTP status codes:
    - ValidationAppError → 400 Bad Request (client fault)
    - RateLimitAppError → 429 Too Many Requests (quota headers attached)
    - LLMAppError → 502 Bad Gateway (upstream provider fault)
    
    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).
    
    Returns:
        JSONResponse with appropriate status code and error message.
    """
    status_code = _status_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        }
    )

    headers = exc.headers if isinstance(exc, RateLimitAppError) else None

    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message},
        headers=headers,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).
    
    Logs detailed information for debugging while returning generic message.
    Prevents information leakage (no stack traces to client).
    
    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).
    
    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        }
    )
    
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred. Please try again later."},
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.
    
    Order matters: specific handlers registered before general fallback.
    
    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
