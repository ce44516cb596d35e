"""
tests.test_slugs

Unit tests for slug derivation, collision suffixes and generated SKUs.
"""

from __future__ import annotations

import re

import pytest

from storefront.catalog.slugs import generate_sku, slugify, unique_slug
from storefront.errors import ValidationFailed


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Test Product Name", "test-product-name"),
        ("Test Product! @#$%^&*()", "test-product"),
        ("  Test   Product   Name  ", "test-product-name"),
        ("T-Shirt (XL) / 100% Cotton", "t-shirt-xl-100-cotton"),
        ("Café Crème", "caf-cr-me"),
    ],
)
def test_slugify(name: str, expected: str) -> None:
    assert slugify(name) == expected


@pytest.mark.parametrize("name", ["", "   ", "!!!", "---", "éàü"])
def test_slugify_rejects_names_without_alphanumerics(name: str) -> None:
    with pytest.raises(ValidationFailed, match="Invalid slug generated"):
        slugify(name)


def test_slugify_is_deterministic() -> None:
    assert slugify("Poster Print A3") == slugify("Poster Print A3")


def test_unique_slug_returns_base_when_free() -> None:
    assert unique_slug("mug", set()) == "mug"
    assert unique_slug("mug", {"mug-2"}) == "mug"


def test_unique_slug_picks_first_free_suffix() -> None:
    assert unique_slug("mug", {"mug"}) == "mug-2"
    assert unique_slug("mug", {"mug", "mug-2", "mug-3"}) == "mug-4"
    # Gaps are reused deterministically.
    assert unique_slug("mug", {"mug", "mug-3"}) == "mug-2"


def test_generate_sku() -> None:
    sku = generate_sku(123, 1)
    assert re.fullmatch(r"PRD-123-\d+", sku)
    assert generate_sku(123, 1) != generate_sku(123, 2)
    assert generate_sku(123, 1) != generate_sku(12, 31)
