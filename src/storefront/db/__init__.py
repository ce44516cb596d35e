"""
storefront.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories for both services.
"""

# Package marker.
