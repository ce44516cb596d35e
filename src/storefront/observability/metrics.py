"""
storefront.observability.metrics

Prometheus metrics exposed on `/metrics`.

Responsibilities:
- Count requests per (method, route template, status) and observe latency.
- Include the default process/platform/GC collectors.
- Render the registry in the Prometheus text exposition format.
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)


class RequestMetrics:
    """
    One registry per app instance, so several apps (tests, both services in one
    process) never register the same metric twice.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self) -> None:
        self.registry = CollectorRegistry()
        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)

        self._requests = Counter(
            "storefront_http_requests",
            "HTTP requests by method, route template and status.",
            labelnames=("method", "route", "status"),
            registry=self.registry,
        )
        self._latency = Histogram(
            "storefront_http_request_duration_seconds",
            "HTTP request latency by method and route template.",
            labelnames=("method", "route"),
            registry=self.registry,
        )

    def record(self, *, method: str, route: str, status: int, duration: float) -> None:
        self._requests.labels(method=method, route=route, status=str(status)).inc()
        self._latency.labels(method=method, route=route).observe(duration)

    def render(self) -> bytes:
        return generate_latest(self.registry)
