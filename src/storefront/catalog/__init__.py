"""
storefront.catalog

Catalog domain helpers that do not touch the database directly.

Responsibilities:
- Slug and SKU generation.
- Translation of listing query parameters into SQLAlchemy predicates and ordering.
"""

# Package marker.
