"""
storefront.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation and in-process request metrics.
"""

# Package marker.
