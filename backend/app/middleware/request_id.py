"""
Samanvi Backend — Request ID Middleware
=========================================

What:  Assigns an ID to each request and echoes it in the X-Request-ID header.
Why:   Lets an admin quote the ID from an error response and find every log
       line belonging to that request.
How:   Reuses a client-supplied X-Request-ID or generates a short UUID, then
       stores it in a ContextVar (for loggers and error handlers) and in
       request.state (for route handlers).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
