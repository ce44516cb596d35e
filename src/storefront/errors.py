"""
storefront.errors

Domain exceptions raised by services and repositories.

Each exception carries the HTTP status it maps to; the API layer renders
them into the `{success: false, error}` envelope (see `api.errors`).
"""

from __future__ import annotations

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
)


class ServiceError(Exception):
    status_code: int = HTTP_400_BAD_REQUEST

    def __init__(self, message: str | list[str], *, status_code: int | None = None) -> None:
        super().__init__(message if isinstance(message, str) else "; ".join(message))
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(ServiceError):
    status_code = HTTP_400_BAD_REQUEST


class ConflictError(ServiceError):
    # Duplicates are reported as validation failures on the wire.
    status_code = HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    status_code = HTTP_404_NOT_FOUND


class AuthenticationError(ServiceError):
    status_code = HTTP_401_UNAUTHORIZED


class PermissionDenied(ServiceError):
    status_code = HTTP_403_FORBIDDEN
