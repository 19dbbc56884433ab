"""
Printful Proxy - Request Logging Middleware
===========================================

What:  One access log line per HTTP request, with duration and request ID.
How:   Measures time around call_next and logs on the `printful_proxy.access`
       logger at a level chosen from the response status.

Logged:      method, path, action, status, duration, request ID, client IP
Not logged:  request bodies (recipient names and addresses), auth headers
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from printful_proxy.middleware.request_id import request_id_var

logger = logging.getLogger("printful_proxy.access")

# Probed every few seconds by orchestrators
SILENT_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Level by status:
        5xx → ERROR    (Printful or proxy failure)
        4xx → WARNING  (caller sent bad input)
        else → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SILENT_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        action = request.query_params.get("action", "-")
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
            "%s %s action=%s %d %.1fms [%s] from %s",
            method,
            path,
            action,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "action": action,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
