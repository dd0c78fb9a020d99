"""
Error handling utilities for story generation and analysis.

This module provides custom exceptions, FastAPI exception handlers and a
decorator for consistent error handling across the application.
"""
import asyncio
import logging
import time
import uuid
from typing import Callable, TypeVar, ParamSpec
from functools import wraps
from contextvars import ContextVar

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Context variable for request ID tracking across async contexts
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

# Type variables for generic function signatures
P = ParamSpec('P')
T = TypeVar('T')


# ============================================================================
# Custom Exceptions
# ============================================================================

class StoryLensError(Exception):
    """Base exception for story generation errors."""
    pass


class InputValidationError(StoryLensError):
    """Request input rejected before any upstream call (image count, keyword, size)."""
    pass


class GenerationError(StoryLensError):
    """Upstream generation failed, timed out, or returned no usable text."""
    pass


class SimilarityCheckError(StoryLensError):
    """A single sentence's similarity lookup failed."""
    pass


class ClientConfigurationError(StoryLensError):
    """Client not properly configured."""
    pass


# ============================================================================
# Error Handler Decorator
# ============================================================================

def _to_http_exception(
    exc: Exception,
    error_message: str,
    func_name: str,
    request_id: str,
    elapsed: float
) -> HTTPException:
    """Log an exception and convert it to the matching HTTPException."""
    headers = {"X-Request-ID": request_id}

    if isinstance(exc, InputValidationError):
        logger.error(f"[{request_id}] {error_message} - Invalid input after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=str(exc), headers=headers)
    if isinstance(exc, GenerationError):
        logger.error(f"[{request_id}] {error_message} - Generation error after {elapsed:.2f}s: {exc}")
        return HTTPException(
            status_code=502,
            detail=f"Story generation failed: {str(exc)}",
            headers=headers
        )
    if isinstance(exc, ClientConfigurationError):
        logger.error(f"[{request_id}] {error_message} - Configuration error after {elapsed:.2f}s: {exc}")
        return HTTPException(
            status_code=500,
            detail=f"Service configuration error: {str(exc)}",
            headers=headers
        )
    if isinstance(exc, StoryLensError):
        logger.error(f"[{request_id}] {error_message} - Service error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=str(exc), headers=headers)
    if isinstance(exc, ValueError):
        logger.error(f"[{request_id}] {error_message} - Invalid value after {elapsed:.2f}s: {exc}")
        return HTTPException(
            status_code=400,
            detail=f"Invalid input: {str(exc)}",
            headers=headers
        )

    logger.exception(
        f"[{request_id}] {error_message} - Unexpected error in {func_name} after {elapsed:.2f}s: {exc}"
    )
    return HTTPException(
        status_code=500,
        detail=f"{error_message}: {str(exc)}",
        headers=headers
    )


def _log_completion(request_id: str, func_name: str, elapsed: float) -> None:
    """Log completion, warning when the response time exceeds the threshold."""
    from storylens.core.config import settings
    threshold_ms = settings.RESPONSE_TIME_WARNING_THRESHOLD_MS
    elapsed_ms = elapsed * 1000
    if elapsed_ms > threshold_ms:
        logger.warning(
            f"[{request_id}] SLOW RESPONSE: {func_name} took {elapsed:.2f}s "
            f"({elapsed_ms:.0f}ms > {threshold_ms}ms threshold)"
        )
    else:
        logger.info(f"[{request_id}] Completed {func_name} in {elapsed:.2f}s")


def handle_service_errors(
    error_message: str = "Operation failed"
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to handle errors in generation and analysis endpoints.

    Automatically converts service errors to appropriate HTTP exceptions
    and logs them. Works with both sync and async functions.

    Args:
        error_message: Custom error message prefix

    Returns:
        Decorated function with error handling

    Example:
        @handle_service_errors("Failed to generate story")
        async def generate(request: GenerateStoryRequest) -> dict:
            ...
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            """Async wrapper for error handling with request tracking and timing."""
            if not request_id_var.get():
                request_id_var.set(str(uuid.uuid4()))

            request_id = request_id_var.get()
            start_time = time.time()

            try:
                logger.info(f"[{request_id}] Starting {func.__name__}")
                result = await func(*args, **kwargs)
                _log_completion(request_id, func.__name__, time.time() - start_time)
                return result
            except HTTPException:
                raise
            except Exception as e:
                raise _to_http_exception(
                    e, error_message, func.__name__, request_id, time.time() - start_time
                )

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            """Sync wrapper for error handling with request tracking and timing."""
            if not request_id_var.get():
                request_id_var.set(str(uuid.uuid4()))

            request_id = request_id_var.get()
            start_time = time.time()

            try:
                logger.info(f"[{request_id}] Starting {func.__name__}")
                result = func(*args, **kwargs)
                _log_completion(request_id, func.__name__, time.time() - start_time)
                return result
            except HTTPException:
                raise
            except Exception as e:
                raise _to_http_exception(
                    e, error_message, func.__name__, request_id, time.time() - start_time
                )

        # Return appropriate wrapper based on function type
        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        else:
            return sync_wrapper  # type: ignore

    return decorator


# ============================================================================
# FastAPI Exception Handlers
# ============================================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as JSON with the request id attached."""
    request_id = request_id_var.get()
    headers = dict(exc.headers or {})
    if request_id:
        headers.setdefault("X-Request-ID", request_id)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "request_id": request_id or None},
        headers=headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request body validation errors as a 422 JSON payload."""
    request_id = request_id_var.get()
    logger.warning(f"[{request_id}] Request validation failed: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={
            "error": "Request validation failed",
            "details": jsonable_errors(exc),
            "request_id": request_id or None
        },
        headers={"X-Request-ID": request_id} if request_id else None
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Reduce pydantic error entries to JSON-safe location/message pairs."""
    return [
        {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]
