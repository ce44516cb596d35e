"""
storefront.api

API package for the catalog and user services.

Responsibilities:
- FastAPI app factories and router modules.
- API-layer dependency wiring, error rendering and response envelopes.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to services.
