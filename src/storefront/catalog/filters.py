"""
storefront.catalog.filters

Query filter builder for product listings.

Responsibilities:
- Hold the parsed listing parameters (`ProductFilters`, `Pagination`).
- Translate them into a conjunctive list of predicates over `Product`.
- Resolve sort field/direction and compute pagination metadata.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from sqlalchemy import ColumnElement, Text, cast, or_

from storefront.db.models import Product
from storefront.errors import ValidationFailed

# Wire name -> column. `id` is always appended as a tie-breaker.
SORT_FIELDS: dict[str, Any] = {
    "createdAt": Product.created_at,
    "updatedAt": Product.updated_at,
    "name": Product.name,
    "basePrice": Product.base_price,
}
SORT_DIRECTIONS = ("ASC", "DESC")


@dataclass(frozen=True, slots=True)
class ProductFilters:
    category_id: int | None = None
    search: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    # None means "do not filter"; False is a real filter.
    is_customizable: bool | None = None
    sort_by: str = "createdAt"
    sort_order: str = "DESC"


@dataclass(frozen=True, slots=True)
class Pagination:
    page: int = 1
    limit: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationFailed("page must be >= 1")
        if self.limit < 1:
            raise ValidationFailed("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def build_product_conditions(filters: ProductFilters) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = [Product.is_active.is_(True)]

    if filters.category_id is not None:
        conditions.append(Product.category_id == filters.category_id)

    term = (filters.search or "").strip()
    if term:
        conditions.append(
            or_(
                Product.name.icontains(term, autoescape=True),
                Product.description.icontains(term, autoescape=True),
            )
        )

    if (
        filters.min_price is not None
        and filters.max_price is not None
        and filters.min_price > filters.max_price
    ):
        raise ValidationFailed("minPrice must not exceed maxPrice")
    if filters.min_price is not None:
        conditions.append(Product.base_price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Product.base_price <= filters.max_price)

    # Containment over the serialized JSON list: portable across SQLite and Postgres.
    tags_text = cast(Product.tags, Text)
    for tag in filters.tags:
        conditions.append(tags_text.contains(json.dumps(tag), autoescape=True))

    if filters.is_customizable is not None:
        conditions.append(Product.is_customizable.is_(filters.is_customizable))

    return conditions


def build_order_by(filters: ProductFilters) -> list[ColumnElement[Any]]:
    column = SORT_FIELDS.get(filters.sort_by)
    if column is None:
        allowed = ", ".join(SORT_FIELDS)
        raise ValidationFailed(f"sortBy must be one of: {allowed}")

    direction = filters.sort_order.upper()
    if direction not in SORT_DIRECTIONS:
        raise ValidationFailed("sortOrder must be ASC or DESC")

    if direction == "ASC":
        return [column.asc(), Product.id.asc()]
    return [column.desc(), Product.id.desc()]


def page_meta(pagination: Pagination, total: int) -> dict[str, int]:
    return {
        "page": pagination.page,
        "limit": pagination.limit,
        "totalPages": math.ceil(total / pagination.limit),
        "totalItems": total,
    }
