"""
storefront.api.routers.health

Health, readiness and metrics endpoints (mounted by both services).

Responsibilities:
- Provide liveness check (`/health`).
- Provide readiness check (`/ready`) with DB connectivity validation.
- Expose Prometheus metrics (`/metrics`).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from storefront.api.deps import db_session
from storefront.errors import ServiceError
from storefront.observability.logging import get_logger
from storefront.observability.metrics import RequestMetrics

log = get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/ready")
async def ready(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        log.warning("readiness_check_failed", error=str(e))
        raise ServiceError("Database unavailable", status_code=HTTP_503_SERVICE_UNAVAILABLE) from e
    return {"status": "ready"}


@router.get("/metrics")
async def prometheus_metrics(request: Request) -> Response:
    metrics: RequestMetrics = request.app.state.metrics
    return Response(content=metrics.render(), media_type=metrics.content_type)


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /health for liveness and /ready for readiness gating.
