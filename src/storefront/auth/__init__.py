"""
storefront.auth

Authentication/authorization package.

Responsibilities:
- JWT issuing and validation.
- Password hashing.
- FastAPI auth dependencies (Principal + role gate).
"""

# Package marker.
