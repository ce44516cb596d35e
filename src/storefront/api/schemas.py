"""
storefront.api.schemas

Shared request/response building blocks.

Responsibilities:
- `CamelModel`: camelCase on the wire, snake_case in Python, ORM-friendly.
- Response envelopes: `{success, data, message?}`, paginated lists, bare messages.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class DataMessageEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: T
    message: str


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


class PageMeta(BaseModel):
    page: int
    limit: int
    totalPages: int
    totalItems: int


class PageEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    pagination: PageMeta


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str | list[str]
