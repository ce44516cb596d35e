"""
tests.conftest

Shared fixtures: one fresh in-memory database per test, one app per service.

Responsibilities:
- Build the catalog/user apps with test settings and run their lifespan explicitly.
- Expose httpx clients bound to the apps through ASGITransport (no network).
- Offer small helpers for seeding categories and authenticated users.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from storefront.api.app import create_catalog_app, create_user_app
from storefront.settings import Settings

TEST_PASSWORD = "password123"


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "env": "test",
        "database_url": "sqlite+aiosqlite://",
        "jwt_secret": "test-secret",
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


@asynccontextmanager
async def serve(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # httpx ASGITransport does not manage lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def catalog_client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    async with serve(create_catalog_app(settings=settings)) as client:
        yield client


@pytest_asyncio.fixture
async def user_client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    async with serve(create_user_app(settings=settings)) as client:
        yield client


async def create_category(
    client: httpx.AsyncClient, name: str = "Test Category", **extra: Any
) -> dict[str, Any]:
    r = await client.post("/categories", json={"name": name, **extra})
    assert r.status_code == 201, r.text
    return r.json()["data"]


async def register_and_login(
    client: httpx.AsyncClient,
    *,
    email: str = "testuser@example.com",
    name: str = "Test User",
    role: str | None = None,
) -> str:
    body: dict[str, Any] = {"email": email, "password": TEST_PASSWORD, "name": name}
    if role is not None:
        body["role"] = role
    r = await client.post("/auth/register", json=body)
    assert r.status_code == 201, r.text

    r = await client.post("/auth/login", json={"email": email, "password": TEST_PASSWORD})
    assert r.status_code == 200, r.text
    return r.json()["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
