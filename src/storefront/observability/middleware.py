"""
storefront.observability.middleware

HTTP middleware for request-scoped logging context and request metrics.

Responsibilities:
- Generate/propagate request IDs.
- Bind request metadata into structlog contextvars.
- Record every request into `RequestMetrics`.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from storefront.observability.metrics import RequestMetrics


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    - Ensures every request has a request id
    - Binds request-scoped contextvars for structured logs
    - Feeds method/route/status/latency into the metrics registry
    """

    def __init__(self, app: ASGIApp, *, metrics: RequestMetrics) -> None:
        super().__init__(app)
        self._metrics = metrics

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        started = time.perf_counter()
        status = 500
        try:
            response: Response = await call_next(request)
            status = response.status_code
        finally:
            self._metrics.record(
                method=request.method,
                route=_route_template(request),
                status=status,
                duration=time.perf_counter() - started,
            )
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


def _route_template(request: Request) -> str:
    # Templates ("/products/{product_id}") keep the metric keys bounded.
    route = request.scope.get("route")
    return getattr(route, "path", None) or "<unmatched>"
