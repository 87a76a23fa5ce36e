"""
Samanvi Backend — Rate Limiting Middleware
============================================

What:  Per-IP sliding window rate limiter.
Why:   Caps how fast any one client can hammer the API (credential guessing
       against /api/users/login and the gates included).
How:   Keeps the timestamps of each IP's recent requests in memory.
When:  Outermost middleware, so rejected requests cost almost nothing.

Algorithm: Sliding Window
    1. Each IP gets a list of request timestamps
    2. On each request, drop timestamps older than the window
    3. If the remaining count has reached the limit → 429 with Retry-After
    4. Otherwise record the request and let it through

    Default budget: 100 requests per 15 minutes per IP.

Scope:
    State lives in this process. Several uvicorn workers each keep their own
    counters, so the effective limit is per worker.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Args:
        max_requests:   Requests allowed per window (RATE_LIMIT_REQUESTS)
        window_seconds: Window length in seconds (RATE_LIMIT_WINDOW)

    Excluded paths:
        /health and the API docs are never limited.

    The 429 body has the same shape as every other error response.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, max_requests: int = 100, window_seconds: int = 900):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        now = time.time()
        window_start = now - self.window_seconds

        # ── Sliding Window: drop old entries ──────────────────────────────
        self._requests[client_ip] = [
            ts for ts in self._requests[client_ip] if ts > window_start
        ]

        # ── Check rate limit ──────────────────────────────────────────────
        if len(self._requests[client_ip]) >= self.max_requests:
            oldest = self._requests[client_ip][0]
            retry_after = int(oldest + self.window_seconds - now) + 1
            error = RateLimitExceededError(retry_after=retry_after)

            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window (%s %s)",
                client_ip,
                len(self._requests[client_ip]),
                self.window_seconds,
                request.method,
                request.url.path,
            )

            return JSONResponse(
                status_code=error.status_code,
                content={
                    "message": error.message,
                    "error": error.code,
                    "details": {"retry_after": retry_after},
                    "request_id": request.headers.get("X-Request-ID"),
                },
                headers={"Retry-After": str(retry_after)},
            )

        self._requests[client_ip].append(now)

        # ── Periodic cleanup of inactive IPs ──────────────────────────────
        if sum(len(v) for v in self._requests.values()) % 1000 == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget IPs with no request inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or max(timestamps) < window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
