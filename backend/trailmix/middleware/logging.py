"""
TrailMix Backend: Request Logging Middleware
==============================================

What:  One access-log line per HTTP request with status and duration.
How:   Measures time around `call_next`, picks the level from the status
       code, and attaches structured fields via `extra`.
When:  Runs inside RequestIDMiddleware so the request ID is already set.

Log line:
    POST /api/trails 201 42.7ms [a1b2c3d4] from 192.168.1.20

Not logged: request bodies, uploaded files, Authorization headers.
GET /health is skipped entirely.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from trailmix.middleware.request_id import request_id_var

logger = logging.getLogger("trailmix.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status, duration and client IP per request.

    Levels: 5xx → ERROR, 4xx → WARNING, everything else → INFO.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
