"""
storefront.services.product_service

Product lifecycle service for the catalog.

Responsibilities:
- Create a product with its variants and images in one all-or-nothing transaction.
- Read a single product (detail) and filtered/paginated listings.
- Partial updates (slug follows renames) and soft deletes.
"""

from __future__ import annotations

from typing import Any

from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.filters import (
    Pagination,
    ProductFilters,
    build_order_by,
    build_product_conditions,
    page_meta,
)
from storefront.catalog.slugs import generate_sku, slugify, unique_slug
from storefront.db.models import Product
from storefront.db.repositories.categories import CategoryRepo
from storefront.db.repositories.products import ImageRepo, ProductRepo, VariantRepo
from storefront.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.observability.logging import get_logger

log = get_logger(__name__)

# Columns a PUT may touch; variants/images/is_active have their own flows.
UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "short_description",
        "category_id",
        "base_price",
        "is_customizable",
        "weight",
        "dimensions",
        "tags",
        "extra_metadata",
    }
)
# Columns declared NOT NULL on `Product`; an explicit null is a client error.
NON_NULLABLE_FIELDS = frozenset(
    {"name", "category_id", "base_price", "is_customizable", "tags"}
)


class ProductService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._products = ProductRepo(session)
        self._variants = VariantRepo(session)
        self._images = ImageRepo(session)
        self._categories = CategoryRepo(session)

    async def create_product(self, data: dict[str, Any]) -> Product:
        fields = dict(data)
        variants: list[dict[str, Any]] = list(fields.pop("variants", None) or [])
        images: list[dict[str, Any]] = list(fields.pop("images", None) or [])

        if not fields.get("name") or fields.get("category_id") is None or fields.get(
            "base_price"
        ) is None:
            raise ValidationFailed("Name, category, and base price are required")
        for variant in variants:
            if not variant.get("name") or variant.get("price") is None:
                raise ValidationFailed("Each variant must have a name and price")
        for image in images:
            if not image.get("image_url"):
                raise ValidationFailed("Each image must have a valid imageUrl")

        explicit_skus = [v["sku"] for v in variants if v.get("sku")]
        if len(explicit_skus) != len(set(explicit_skus)):
            raise ConflictError("Duplicate SKU in request")

        await self._require_category(fields["category_id"])

        try:
            base = slugify(fields["name"])
            fields["slug"] = unique_slug(base, await self._products.slugs_with_prefix(base))
            fields.setdefault("tags", [])
            product = await self._products.create(**fields)

            taken = await self._variants.existing_skus(explicit_skus)
            if taken:
                raise ConflictError(f"SKU already exists: {', '.join(sorted(taken))}")

            assigned = set(explicit_skus)
            for position, variant in enumerate(variants, start=1):
                variant_fields = dict(variant)
                sku = variant_fields.pop("sku", None)
                if not sku:
                    sku_base = generate_sku(product.id, position)
                    in_use = assigned | await self._variants.skus_with_prefix(sku_base)
                    sku = unique_slug(sku_base, in_use)
                    assigned.add(sku)
                await self._variants.create(product_id=product.id, sku=sku, **variant_fields)

            for image in images:
                image_fields = dict(image)
                image_url = image_fields.pop("image_url")
                await self._images.create(
                    product_id=product.id, image_url=image_url, **image_fields
                )

            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        log.info(
            "product_created",
            product_id=product.id,
            slug=product.slug,
            variants=len(variants),
            images=len(images),
        )
        return await self.get_product(product.id)

    async def get_product(self, product_id: int) -> Product:
        product = await self._products.get_detail(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    async def list_products(
        self, filters: ProductFilters, pagination: Pagination
    ) -> tuple[list[Product], dict[str, int]]:
        conditions = build_product_conditions(filters)
        order_by = build_order_by(filters)

        total = await self._products.count(conditions=conditions)
        rows = await self._products.search(
            conditions=conditions,
            order_by=order_by,
            limit=pagination.limit,
            offset=pagination.offset,
        )
        return rows, page_meta(pagination, total)

    async def update_product(self, product_id: int, changes: dict[str, Any]) -> Product:
        product = await self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationFailed(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        updates = dict(changes)
        nulled = sorted(f for f in NON_NULLABLE_FIELDS if f in updates and updates[f] is None)
        if nulled:
            raise ValidationFailed([f"{to_camel(f)} cannot be null" for f in nulled])

        if "category_id" in updates and updates["category_id"] != product.category_id:
            await self._require_category(updates["category_id"])

        if "name" in updates and updates["name"] != product.name:
            base = slugify(updates["name"])
            taken = await self._products.slugs_with_prefix(base, exclude_id=product.id)
            updates["slug"] = unique_slug(base, taken)

        try:
            await self._products.apply(product, updates)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        log.info("product_updated", product_id=product_id, fields=sorted(updates))
        return await self.get_product(product_id)

    async def delete_product(self, product_id: int) -> str:
        product = await self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        await self._products.apply(product, {"is_active": False})
        await self._session.commit()
        log.info("product_deleted", product_id=product_id)
        return "Product deleted successfully"

    async def _require_category(self, category_id: int) -> None:
        if await self._categories.get(category_id) is None:
            raise ValidationFailed("Category not found")
