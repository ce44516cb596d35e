"""
storefront.api.routers.products

Catalog product endpoints.

Responsibilities:
- CRUD over `/products` with soft delete.
- Parse listing query parameters into `ProductFilters` / `Pagination`.
- Render products (category summary, variants, images) in the response envelope.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import AliasChoices, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from storefront.api.deps import db_session, settings_dep
from storefront.api.schemas import (
    CamelModel,
    DataEnvelope,
    DataMessageEnvelope,
    MessageEnvelope,
    PageEnvelope,
    PageMeta,
)
from storefront.catalog.filters import Pagination, ProductFilters
from storefront.errors import ValidationFailed
from storefront.services.product_service import ProductService
from storefront.settings import Settings

router = APIRouter(prefix="/products", tags=["products"])


class VariantIn(CamelModel):
    sku: str | None = Field(default=None, min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0)
    cost_price: Decimal | None = Field(default=None, ge=0)
    inventory_count: int = Field(default=0, ge=0)
    attributes: dict[str, Any] | None = None
    is_active: bool = True


class ImageIn(CamelModel):
    image_url: str = Field(min_length=1, max_length=2048)
    alt_text: str | None = Field(default=None, max_length=255)
    is_primary: bool = False
    sort_order: int = 0


class ProductCreateRequest(CamelModel):
    name: str = Field(min_length=2, max_length=255)
    description: str | None = None
    short_description: str | None = Field(default=None, max_length=500)
    category_id: int
    base_price: Decimal = Field(ge=0)
    is_customizable: bool = False
    weight: Decimal | None = Field(default=None, ge=0)
    dimensions: dict[str, Any] | None = None
    tags: list[str] = Field(default_factory=list)
    extra_metadata: dict[str, Any] | None = Field(default=None, alias="metadata")
    variants: list[VariantIn] = Field(default_factory=list)
    images: list[ImageIn] = Field(default_factory=list)


class ProductUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=2, max_length=255)
    description: str | None = None
    short_description: str | None = Field(default=None, max_length=500)
    category_id: int | None = None
    base_price: Decimal | None = Field(default=None, ge=0)
    is_customizable: bool | None = None
    weight: Decimal | None = Field(default=None, ge=0)
    dimensions: dict[str, Any] | None = None
    tags: list[str] | None = None
    extra_metadata: dict[str, Any] | None = Field(default=None, alias="metadata")


class CategorySummary(CamelModel):
    id: int
    name: str
    slug: str


class VariantOut(CamelModel):
    id: int
    sku: str
    name: str
    price: Decimal
    cost_price: Decimal | None = None
    inventory_count: int
    attributes: dict[str, Any] | None = None
    is_active: bool


class ImageOut(CamelModel):
    id: int
    image_url: str
    alt_text: str | None = None
    is_primary: bool
    sort_order: int


class ProductOut(CamelModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    short_description: str | None = None
    category_id: int
    base_price: Decimal
    is_customizable: bool
    is_active: bool
    weight: Decimal | None = None
    dimensions: dict[str, Any] | None = None
    tags: list[str] = Field(default_factory=list)
    # ORM objects expose `metadata` as the SQLAlchemy MetaData, so read the mapped attribute.
    extra_metadata: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("extra_metadata", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime
    updated_at: datetime
    category: CategorySummary | None = None
    variants: list[VariantOut] = Field(default_factory=list)
    images: list[ImageOut] = Field(default_factory=list)


class ProductSummaryOut(ProductOut):
    """
    Listing row: only the first active variant and the primary images are loaded.
    """

    @field_validator("variants")
    @classmethod
    def _first_variant_only(cls, value: list[VariantOut]) -> list[VariantOut]:
        return value[:1]


def _split_tags(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(tag.strip() for tag in raw.split(",") if tag.strip())


@router.post(
    "",
    status_code=HTTP_201_CREATED,
    response_model=DataMessageEnvelope[ProductOut],
)
async def create_product(
    body: ProductCreateRequest,
    session: AsyncSession = Depends(db_session),
) -> DataMessageEnvelope[ProductOut]:
    product = await ProductService(session=session).create_product(body.model_dump())
    return DataMessageEnvelope[ProductOut](
        data=ProductOut.model_validate(product),
        message="Product created successfully",
    )


@router.get("", response_model=PageEnvelope[ProductSummaryOut])
async def list_products(
    category_id: int | None = Query(default=None, alias="categoryId"),
    search: str | None = Query(default=None, max_length=255),
    min_price: Decimal | None = Query(default=None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(default=None, alias="maxPrice", ge=0),
    tags: str | None = Query(default=None),
    is_customizable: bool | None = Query(default=None, alias="isCustomizable"),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="DESC", alias="sortOrder"),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> PageEnvelope[ProductSummaryOut]:
    page_size = limit or settings.default_page_size
    if page_size > settings.max_page_size:
        raise ValidationFailed(f"limit must be <= {settings.max_page_size}")

    filters = ProductFilters(
        category_id=category_id,
        search=search,
        min_price=min_price,
        max_price=max_price,
        tags=_split_tags(tags),
        is_customizable=is_customizable,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    rows, meta = await ProductService(session=session).list_products(
        filters, Pagination(page=page, limit=page_size)
    )
    return PageEnvelope[ProductSummaryOut](
        data=[ProductSummaryOut.model_validate(row) for row in rows],
        pagination=PageMeta(**meta),
    )


@router.get("/{product_id}", response_model=DataEnvelope[ProductOut])
async def get_product(
    product_id: int,
    session: AsyncSession = Depends(db_session),
) -> DataEnvelope[ProductOut]:
    product = await ProductService(session=session).get_product(product_id)
    return DataEnvelope[ProductOut](data=ProductOut.model_validate(product))


@router.put("/{product_id}", response_model=DataMessageEnvelope[ProductOut])
async def update_product(
    product_id: int,
    body: ProductUpdateRequest,
    session: AsyncSession = Depends(db_session),
) -> DataMessageEnvelope[ProductOut]:
    changes = body.model_dump(exclude_unset=True)
    product = await ProductService(session=session).update_product(product_id, changes)
    return DataMessageEnvelope[ProductOut](
        data=ProductOut.model_validate(product),
        message="Product updated successfully",
    )


@router.delete("/{product_id}", response_model=MessageEnvelope)
async def delete_product(
    product_id: int,
    session: AsyncSession = Depends(db_session),
) -> MessageEnvelope:
    message = await ProductService(session=session).delete_product(product_id)
    return MessageEnvelope(message=message)


# --- Module Notes -----------------------------------------------------------
# Catalog endpoints carry no auth dependency; bearer tokens are only checked
# by the user service routers.
