"""
storefront.db.repositories.categories

Repository for `Category` entities.

Responsibilities:
- Create categories and apply partial updates inside the caller's transaction.
- Load active categories, with parent and subcategories for detail views.
- Walk ancestor links and collect taken slugs for the service rules.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.db.models import Category


class CategoryRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> Category:
        category = Category(**fields)
        self._session.add(category)
        await self._session.flush()
        return category

    async def get(self, category_id: int, *, active_only: bool = True) -> Category | None:
        category = await self._session.get(Category, category_id)
        if category is None or (active_only and not category.is_active):
            return None
        return category

    async def get_detail(self, category_id: int) -> Category | None:
        stmt = (
            select(Category)
            .where(Category.id == category_id, Category.is_active.is_(True))
            .options(
                selectinload(Category.parent),
                selectinload(Category.subcategories.and_(Category.is_active.is_(True))),
            )
            .execution_options(populate_existing=True)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_active(
        self, *, parent_id: int | None = None, roots_only: bool = False
    ) -> list[Category]:
        stmt = select(Category).where(Category.is_active.is_(True))
        if parent_id is not None:
            stmt = stmt.where(Category.parent_id == parent_id)
        elif roots_only:
            stmt = stmt.where(Category.parent_id.is_(None))
        stmt = stmt.order_by(Category.sort_order, Category.name, Category.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def ancestor_ids(self, category_id: int) -> list[int]:
        # Walks parent links upward; the hierarchy is shallow in practice.
        ids: list[int] = []
        current = await self._session.get(Category, category_id)
        while current is not None and current.parent_id is not None:
            if current.parent_id in ids:
                break
            ids.append(current.parent_id)
            current = await self._session.get(Category, current.parent_id)
        return ids

    async def slugs_with_prefix(self, base: str, *, exclude_id: int | None = None) -> set[str]:
        stmt = select(Category.slug).where(
            or_(Category.slug == base, Category.slug.startswith(f"{base}-", autoescape=True))
        )
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return set((await self._session.execute(stmt)).scalars().all())

    async def apply(self, category: Category, changes: dict[str, Any]) -> Category:
        for key, value in changes.items():
            setattr(category, key, value)
        await self._session.flush()
        return category
