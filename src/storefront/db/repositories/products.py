"""
storefront.db.repositories.products

Repositories for `Product`, `ProductVariant` and `ProductImage`.

Responsibilities:
- Create product rows and their child variants/images inside the caller's transaction.
- Load products with the associations each endpoint renders.
- Run filtered/paginated listing queries built by `catalog.filters`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.db.models import Product, ProductImage, ProductVariant


class ProductRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, **fields: Any) -> Product:
        product = Product(**fields)
        self._session.add(product)
        await self._session.flush()
        return product

    async def get(self, product_id: int, *, active_only: bool = True) -> Product | None:
        product = await self._session.get(Product, product_id)
        if product is None or (active_only and not product.is_active):
            return None
        return product

    async def get_detail(self, product_id: int) -> Product | None:
        # populate_existing refreshes rows created/updated earlier in this session.
        stmt = (
            select(Product)
            .where(Product.id == product_id, Product.is_active.is_(True))
            .options(
                selectinload(Product.category),
                selectinload(Product.variants.and_(ProductVariant.is_active.is_(True))),
                selectinload(Product.images),
            )
            .execution_options(populate_existing=True)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def search(
        self,
        *,
        conditions: Sequence[ColumnElement[bool]],
        order_by: Sequence[ColumnElement[Any]],
        limit: int,
        offset: int,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .where(*conditions)
            .options(
                selectinload(Product.category),
                selectinload(Product.variants.and_(ProductVariant.is_active.is_(True))),
                selectinload(Product.images.and_(ProductImage.is_primary.is_(True))),
            )
            .order_by(*order_by)
            .limit(limit)
            .offset(offset)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def count(self, *, conditions: Sequence[ColumnElement[bool]]) -> int:
        stmt = select(func.count()).select_from(Product).where(*conditions)
        return int((await self._session.execute(stmt)).scalar_one())

    async def slugs_with_prefix(self, base: str, *, exclude_id: int | None = None) -> set[str]:
        # Soft-deleted rows still hold their slug under the unique constraint.
        stmt = select(Product.slug).where(
            or_(Product.slug == base, Product.slug.startswith(f"{base}-", autoescape=True))
        )
        if exclude_id is not None:
            stmt = stmt.where(Product.id != exclude_id)
        return set((await self._session.execute(stmt)).scalars().all())

    async def apply(self, product: Product, changes: dict[str, Any]) -> Product:
        for key, value in changes.items():
            setattr(product, key, value)
        await self._session.flush()
        return product


class VariantRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, product_id: int, sku: str, **fields: Any) -> ProductVariant:
        variant = ProductVariant(product_id=product_id, sku=sku, **fields)
        self._session.add(variant)
        await self._session.flush()
        return variant

    async def existing_skus(self, skus: Iterable[str]) -> set[str]:
        wanted = list(skus)
        if not wanted:
            return set()
        stmt = select(ProductVariant.sku).where(ProductVariant.sku.in_(wanted))
        return set((await self._session.execute(stmt)).scalars().all())

    async def skus_with_prefix(self, base: str) -> set[str]:
        stmt = select(ProductVariant.sku).where(
            or_(
                ProductVariant.sku == base,
                ProductVariant.sku.startswith(f"{base}-", autoescape=True),
            )
        )
        return set((await self._session.execute(stmt)).scalars().all())


class ImageRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, product_id: int, image_url: str, **fields: Any) -> ProductImage:
        image = ProductImage(product_id=product_id, image_url=image_url, **fields)
        self._session.add(image)
        await self._session.flush()
        return image
