"""
storefront.api.app

FastAPI app factories for the catalog and user services.

Responsibilities:
- Build each service's FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront import __version__
from storefront.api.errors import install_exception_handlers
from storefront.api.ratelimit import (
    build_rate_limiter,
    close_rate_limit_backend,
    open_rate_limit_backend,
)
from storefront.api.routers.auth import router as auth_router
from storefront.api.routers.categories import router as categories_router
from storefront.api.routers.health import router as health_router
from storefront.api.routers.products import router as products_router
from storefront.api.routers.profile import router as profile_router
from storefront.api.security import SecurityHeadersMiddleware
from storefront.db.init_db import init_db
from storefront.db.session import create_engine, create_sessionmaker
from storefront.observability.logging import configure_logging, get_logger
from storefront.observability.metrics import RequestMetrics
from storefront.observability.middleware import RequestContextMiddleware
from storefront.settings import Settings, get_settings

log = get_logger(__name__)


def create_catalog_app(*, settings: Settings) -> FastAPI:
    return _build_app(
        settings=settings,
        title="Storefront Catalog Service",
        service="catalog",
        routers=(products_router, categories_router),
    )


def create_user_app(*, settings: Settings) -> FastAPI:
    return _build_app(
        settings=settings,
        title="Storefront User Service",
        service="users",
        routers=(auth_router, profile_router),
    )


def create_app(*, settings: Settings) -> FastAPI:
    # Dispatch on STOREFRONT_SERVICE for `python -m storefront.api`.
    if settings.service == "users":
        return create_user_app(settings=settings)
    return create_catalog_app(settings=settings)


def _build_app(
    *,
    settings: Settings,
    title: str,
    service: str,
    routers: Iterable[APIRouter],
) -> FastAPI:
    configure_logging(
        service_name=f"{settings.service_name}-{service}",
        level=settings.log_level,
        json_logs=settings.log_json,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, service=service)
        # Create the async DB engine and session factory once and stash them on app.state.
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        redis_client = await open_rate_limit_backend(settings)
        try:
            yield
        finally:
            await close_rate_limit_backend(redis_client)
            await engine.dispose()
            log.info("shutdown", service=service)

    app = FastAPI(
        title=title,
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.metrics = RequestMetrics()
    # Dependencies resolve settings through `get_settings`; pin it to this app's instance.
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.env == "prod")
    app.add_middleware(RequestContextMiddleware, metrics=app.state.metrics)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    limiter = build_rate_limiter(settings)
    quota = [Depends(limiter)] if limiter is not None else []
    for router in routers:
        app.include_router(router, dependencies=quota)

    return app


# --- Module Notes -----------------------------------------------------------
# Both services share models and infrastructure; each app only mounts its own routers.
