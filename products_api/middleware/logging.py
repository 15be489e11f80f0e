"""
Products API - Request Logging Middleware
=========================================

What:  One short, human-readable line per request.
Format:
    GET /api/products 200 4.2 ms

Log level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.
Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("products_api.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status code and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        client_ip = request.client.host if request.client else "unknown"

        logger.log(
            level_for_status(status),
            "%s %s %d %.1f ms",
            request.method,
            request.url.path,
            status,
            duration_ms,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
