"""
storefront.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Enforce role membership via reusable dependency factories.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from storefront.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from storefront.auth.models import Principal
from storefront.observability.logging import get_logger
from storefront.settings import Settings, get_settings

log = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


def get_principal(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings),
) -> Principal:
    # Authn: require a bearer token.
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="No token provided")

    try:
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        log.info("token_rejected", reason=str(e))
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token") from e

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token") from e
    role = payload.get("role")
    if not isinstance(role, str) or not role:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token")

    principal = Principal(user_id=user_id, email=str(payload.get("email", "")), role=role)
    request.state.principal = principal
    return principal


def require_roles(*allowed: str):
    allowed_set = frozenset(allowed)

    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        if principal.role not in allowed_set:
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Forbidden")
        return principal

    return _dep


# --- Module Notes -----------------------------------------------------------
# `get_settings` is the dependency key; `api.app` pins it to the app's own
# Settings through `app.dependency_overrides`.
