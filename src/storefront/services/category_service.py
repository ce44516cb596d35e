"""
storefront.services.category_service

Category lifecycle service for the catalog.

Responsibilities:
- Create/read/update/soft-delete categories with collision-free slugs.
- Keep the parent hierarchy acyclic.
"""

from __future__ import annotations

from typing import Any

from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.slugs import slugify, unique_slug
from storefront.db.models import Category
from storefront.db.repositories.categories import CategoryRepo
from storefront.errors import NotFoundError, ValidationFailed
from storefront.observability.logging import get_logger

log = get_logger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "description", "parent_id", "sort_order"})
NON_NULLABLE_FIELDS = frozenset({"name", "sort_order"})


class CategoryService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._categories = CategoryRepo(session)

    async def create_category(self, data: dict[str, Any]) -> Category:
        fields = dict(data)
        if not fields.get("name"):
            raise ValidationFailed("Name is required")
        if fields.get("parent_id") is not None:
            await self._require_parent(fields["parent_id"])

        base = slugify(fields["name"])
        fields["slug"] = unique_slug(base, await self._categories.slugs_with_prefix(base))
        category = await self._categories.create(**fields)
        await self._session.commit()

        log.info("category_created", category_id=category.id, slug=category.slug)
        return await self.get_category(category.id)

    async def get_category(self, category_id: int) -> Category:
        category = await self._categories.get_detail(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def list_categories(
        self, *, parent_id: int | None = None, roots_only: bool = False
    ) -> list[Category]:
        return await self._categories.list_active(parent_id=parent_id, roots_only=roots_only)

    async def update_category(self, category_id: int, changes: dict[str, Any]) -> Category:
        category = await self._categories.get(category_id)
        if category is None:
            raise NotFoundError("Category not found")

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationFailed(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        updates = dict(changes)
        if "name" in updates and not updates["name"]:
            raise ValidationFailed("Name is required")
        nulled = sorted(f for f in NON_NULLABLE_FIELDS if f in updates and updates[f] is None)
        if nulled:
            raise ValidationFailed([f"{to_camel(f)} cannot be null" for f in nulled])

        new_parent = updates.get("parent_id")
        if new_parent is not None and new_parent != category.parent_id:
            if new_parent == category_id:
                raise ValidationFailed("Category cannot be its own parent")
            await self._require_parent(new_parent)
            if category_id in await self._categories.ancestor_ids(new_parent):
                raise ValidationFailed("Category cannot be moved under its own descendant")

        if "name" in updates and updates["name"] != category.name:
            base = slugify(updates["name"])
            taken = await self._categories.slugs_with_prefix(base, exclude_id=category.id)
            updates["slug"] = unique_slug(base, taken)

        await self._categories.apply(category, updates)
        await self._session.commit()
        log.info("category_updated", category_id=category_id, fields=sorted(updates))
        return await self.get_category(category_id)

    async def delete_category(self, category_id: int) -> str:
        category = await self._categories.get(category_id)
        if category is None:
            raise NotFoundError("Category not found")

        await self._categories.apply(category, {"is_active": False})
        await self._session.commit()
        log.info("category_deleted", category_id=category_id)
        return "Category deleted successfully"

    async def _require_parent(self, parent_id: int) -> None:
        if await self._categories.get(parent_id) is None:
            raise ValidationFailed("Parent category not found")
