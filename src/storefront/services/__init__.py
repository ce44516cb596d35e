"""
storefront.services

Service layer (transaction + validation owner).

Responsibilities:
- Enforce business rules (required fields, slug/SKU uniqueness, role rules).
- Own commit/rollback for the request-scoped session.
"""

# Package marker.
