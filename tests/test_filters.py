"""
tests.test_filters

Unit tests for the product listing query builder (no database needed).
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from storefront.catalog.filters import (
    Pagination,
    ProductFilters,
    build_order_by,
    build_product_conditions,
    page_meta,
)
from storefront.errors import ValidationFailed


def test_default_filters_only_select_active_products() -> None:
    conditions = build_product_conditions(ProductFilters())
    assert len(conditions) == 1
    assert "is_active" in str(conditions[0])


def test_each_filter_adds_a_conjunct() -> None:
    filters = ProductFilters(
        category_id=3,
        search="mug",
        min_price=Decimal("5"),
        max_price=Decimal("50"),
        tags=("gift", "ceramic"),
        is_customizable=False,
    )
    # active + category + search + min + max + 2 tags + customizable
    assert len(build_product_conditions(filters)) == 8


def test_blank_search_is_ignored() -> None:
    assert len(build_product_conditions(ProductFilters(search="   "))) == 1


def test_inverted_price_range_is_rejected() -> None:
    with pytest.raises(ValidationFailed, match="minPrice"):
        build_product_conditions(ProductFilters(min_price=Decimal("10"), max_price=Decimal("5")))


def test_order_by_defaults_to_newest_first() -> None:
    order = build_order_by(ProductFilters())
    rendered = [str(clause) for clause in order]
    assert rendered[0].endswith("created_at DESC")
    assert rendered[1].endswith("id DESC")


def test_order_by_accepts_lowercase_direction() -> None:
    order = build_order_by(ProductFilters(sort_by="basePrice", sort_order="asc"))
    assert str(order[0]).endswith("base_price ASC")


@pytest.mark.parametrize(
    ("sort_by", "sort_order", "message"),
    [("password", "ASC", "sortBy"), ("name", "sideways", "sortOrder")],
)
def test_order_by_rejects_unknown_values(sort_by: str, sort_order: str, message: str) -> None:
    with pytest.raises(ValidationFailed, match=message):
        build_order_by(ProductFilters(sort_by=sort_by, sort_order=sort_order))


def test_pagination_offset() -> None:
    assert Pagination(page=1, limit=20).offset == 0
    assert Pagination(page=3, limit=10).offset == 20


@pytest.mark.parametrize(("page", "limit"), [(0, 10), (1, 0)])
def test_pagination_rejects_non_positive_values(page: int, limit: int) -> None:
    with pytest.raises(ValidationFailed):
        Pagination(page=page, limit=limit)


@pytest.mark.parametrize(
    ("total", "limit", "pages"),
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 20, 2)],
)
def test_page_meta(total: int, limit: int, pages: int) -> None:
    meta = page_meta(Pagination(page=1, limit=limit), total)
    assert meta == {"page": 1, "limit": limit, "totalPages": pages, "totalItems": total}
