"""
Scrum Chatter Backend: Request ID Middleware
=============================================

What:  Assigns a correlation id to each request and returns it in the
       X-Request-ID response header.
How:   Uses the client's X-Request-ID when present, otherwise a short UUID;
       stores it in a ContextVar for loggers and exception handlers, and in
       request.state for route handlers.

Background jobs scheduled while handling a request inherit the ContextVar
value, so their log lines carry the id of the request that submitted them.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
