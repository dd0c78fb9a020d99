"""
HTTP middleware.

Request ids are taken from the caller or generated, exposed to logging via
request_id_var, and echoed back together with the handling time.
"""
import logging
import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from storylens.core.error_handling import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADERS = ("X-Request-ID", "X-Correlation-ID")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the lifetime of each request and log an access line."""

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = next(
            (request.headers[h] for h in REQUEST_ID_HEADERS if request.headers.get(h)),
            None
        ) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.0f}ms"
            )
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.0f}"
        return response
