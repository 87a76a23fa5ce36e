"""
Samanvi Backend — Request Logging Middleware
==============================================

What:  One access-log line per HTTP request on the `samanvi.access` logger.
Why:   Gives operators method, path, status, latency and caller for every
       call, correlated by request ID.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Log line:
    GET /api/buses 200 12.4ms [a1b2c3d4] from 10.0.0.7

Levels:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Never logged:
    request bodies (passwords, document metadata) and the Authorization /
    x-api-key headers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("samanvi.access")

# Probes hit /health every few seconds and would drown out real traffic
UNLOGGED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with its response status and duration.

    An exception escaping the route is logged as a 500 and re-raised; the
    catch-all handler still builds the response body.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            self._log(request, status, (time.perf_counter() - started) * 1000)

    @staticmethod
    def _log(request: Request, status: int, duration_ms: float) -> None:
        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
