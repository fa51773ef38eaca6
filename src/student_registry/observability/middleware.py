"""
student_registry.observability.middleware

Request correlation for page, API and embedded-backend requests.

Responsibilities:
- Accept the caller's `x-request-id` or mint one, and echo it on the response.
- Bind request id, path and method into structlog contextvars.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Binds `request_id`, `path` and `method` for the duration of one request.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        # bound_contextvars restores the previous bindings on exit, so an in-process
        # backend call does not wipe the context of the page request that made it.
        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        ):
            response: Response = await call_next(request)

        response.headers["x-request-id"] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# `HostedBackendClient` forwards the bound request id as `x-request-id`, so the
# embedded backend logs under the same id as the page that triggered it.
