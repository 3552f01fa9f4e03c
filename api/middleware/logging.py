"""Request logging middleware."""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("orderline.api")

# Probed every few seconds by the platform; logged at DEBUG only
QUIET_PATHS = ("/health",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with a short request ID and its duration.

    The webhook answers before its events are processed, so the duration
    logged for /webhook covers acknowledgment only.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        path = request.url.path
        quiet = path.startswith(QUIET_PATHS)

        start_time = time.perf_counter()
        logger.log(logging.DEBUG if quiet else logging.INFO, f"[{request_id}] {request.method} {path}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.error(f"[{request_id}] {request.method} {path} - failed after {duration:.2f}ms: {e}")
            raise

        duration = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = f"{duration:.2f}"

        if response.status_code >= 400:
            level = logging.WARNING
        elif quiet:
            level = logging.DEBUG
        else:
            level = logging.INFO
        logger.log(level, f"[{request_id}] {request.method} {path} - {response.status_code} in {duration:.2f}ms")

        return response
