"""
storefront.catalog.slugs

URL-safe identifiers for catalog rows.

Responsibilities:
- Derive a slug from a display name.
- Pick a collision-free variant of a slug given the slugs already taken.
- Generate default SKUs for variants created without one.
"""

from __future__ import annotations

import re
from collections.abc import Collection

from storefront.errors import ValidationFailed

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    slug = _NON_ALNUM.sub("-", name.lower()).strip("-")
    if not slug:
        raise ValidationFailed("Invalid slug generated")
    return slug


def unique_slug(base: str, taken: Collection[str]) -> str:
    """
    Return `base` if unused, otherwise the first free `base-N` (N >= 2).
    Deterministic for a given set of taken slugs.
    """

    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


def generate_sku(product_id: int, position: int) -> str:
    # Base form only; callers resolve clashes with explicit SKUs via `unique_slug`.
    return f"PRD-{product_id}-{position}"
