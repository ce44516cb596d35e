"""
tests.test_categories

Catalog category endpoints: hierarchy, slugs, and soft delete.
"""

from __future__ import annotations

import httpx
import pytest

from conftest import create_category


@pytest.mark.asyncio
async def test_create_category(catalog_client: httpx.AsyncClient) -> None:
    r = await catalog_client.post(
        "/categories", json={"name": "Wall Art", "description": "Prints and posters", "sortOrder": 3}
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Category created successfully"
    assert body["data"]["slug"] == "wall-art"
    assert body["data"]["sortOrder"] == 3
    assert body["data"]["parentId"] is None
    assert body["data"]["parent"] is None
    assert body["data"]["subcategories"] == []


@pytest.mark.asyncio
async def test_create_category_validation(catalog_client: httpx.AsyncClient) -> None:
    r = await catalog_client.post("/categories", json={"name": "A"})
    assert r.status_code == 400
    assert r.json()["success"] is False

    r = await catalog_client.post("/categories", json={"name": "Orphan", "parentId": 999})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Parent category not found"}


@pytest.mark.asyncio
async def test_category_hierarchy(catalog_client: httpx.AsyncClient) -> None:
    root = await create_category(catalog_client, name="Apparel")
    child = await create_category(catalog_client, name="Shirts", parentId=root["id"])
    await create_category(catalog_client, name="Hoodies", parentId=root["id"], sortOrder=-1)

    assert child["parent"] == {"id": root["id"], "name": "Apparel", "slug": "apparel"}

    r = await catalog_client.get(f"/categories/{root['id']}")
    assert r.status_code == 200
    assert [c["name"] for c in r.json()["data"]["subcategories"]] == ["Hoodies", "Shirts"]

    r = await catalog_client.get("/categories", params={"root": "true"})
    assert [c["name"] for c in r.json()["data"]] == ["Apparel"]

    r = await catalog_client.get("/categories", params={"parentId": root["id"]})
    assert [c["name"] for c in r.json()["data"]] == ["Hoodies", "Shirts"]

    r = await catalog_client.get("/categories")
    assert len(r.json()["data"]) == 3


@pytest.mark.asyncio
async def test_category_slug_collisions(catalog_client: httpx.AsyncClient) -> None:
    first = await create_category(catalog_client, name="Posters")
    second = await create_category(catalog_client, name="posters!")
    assert first["slug"] == "posters"
    assert second["slug"] == "posters-2"


@pytest.mark.asyncio
async def test_update_category(catalog_client: httpx.AsyncClient) -> None:
    category = await create_category(catalog_client)

    r = await catalog_client.put(
        f"/categories/{category['id']}", json={"name": "Renamed Category", "description": "New"}
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["message"] == "Category updated successfully"
    assert body["data"]["slug"] == "renamed-category"
    assert body["data"]["description"] == "New"


@pytest.mark.asyncio
async def test_update_category_rejects_cycles(catalog_client: httpx.AsyncClient) -> None:
    root = await create_category(catalog_client, name="Root")
    child = await create_category(catalog_client, name="Child", parentId=root["id"])
    grandchild = await create_category(catalog_client, name="Grandchild", parentId=child["id"])

    r = await catalog_client.put(f"/categories/{root['id']}", json={"parentId": root["id"]})
    assert r.status_code == 400
    assert r.json()["error"] == "Category cannot be its own parent"

    r = await catalog_client.put(f"/categories/{root['id']}", json={"parentId": grandchild["id"]})
    assert r.status_code == 400
    assert r.json()["error"] == "Category cannot be moved under its own descendant"

    r = await catalog_client.put(f"/categories/{grandchild['id']}", json={"parentId": root["id"]})
    assert r.status_code == 200
    assert r.json()["data"]["parentId"] == root["id"]


@pytest.mark.asyncio
async def test_delete_category_is_soft(catalog_client: httpx.AsyncClient) -> None:
    root = await create_category(catalog_client, name="Root")
    child = await create_category(catalog_client, name="Child", parentId=root["id"])

    r = await catalog_client.delete(f"/categories/{child['id']}")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Category deleted successfully"}

    assert (await catalog_client.get(f"/categories/{child['id']}")).status_code == 404
    detail = (await catalog_client.get(f"/categories/{root['id']}")).json()["data"]
    assert detail["subcategories"] == []

    r = await catalog_client.post(
        "/products", json={"name": "Orphan Product", "categoryId": child["id"], "basePrice": 5}
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Category not found"


@pytest.mark.asyncio
async def test_missing_category(catalog_client: httpx.AsyncClient) -> None:
    r = await catalog_client.get("/categories/999")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Category not found"}


@pytest.mark.asyncio
async def test_update_category_rejects_null_sort_order(catalog_client: httpx.AsyncClient) -> None:
    category = await create_category(catalog_client, sortOrder=4)

    r = await catalog_client.put(f"/categories/{category['id']}", json={"sortOrder": None})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": ["sortOrder cannot be null"]}

    r = await catalog_client.get(f"/categories/{category['id']}")
    assert r.json()["data"]["sortOrder"] == 4


@pytest.mark.asyncio
async def test_update_category_can_move_to_root(catalog_client: httpx.AsyncClient) -> None:
    root = await create_category(catalog_client, name="Root")
    child = await create_category(catalog_client, name="Child", parentId=root["id"])

    r = await catalog_client.put(f"/categories/{child['id']}", json={"parentId": None})
    assert r.status_code == 200
    assert r.json()["data"]["parentId"] is None
