"""
storefront.api.routers.categories

Catalog category endpoints.

Responsibilities:
- CRUD over `/categories` with soft delete.
- Filter listings by parent (`parentId`) or to root categories (`root=true`).
- Render categories with their parent summary and active subcategories.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from storefront.api.deps import db_session
from storefront.api.schemas import CamelModel, DataEnvelope, DataMessageEnvelope, MessageEnvelope
from storefront.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


class CategoryCreateRequest(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    description: str | None = None
    parent_id: int | None = None
    sort_order: int = 0


class CategoryUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = None
    parent_id: int | None = None
    sort_order: int | None = None


class CategoryRef(CamelModel):
    id: int
    name: str
    slug: str


class CategoryOut(CamelModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    parent_id: int | None = None
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class CategoryDetailOut(CategoryOut):
    parent: CategoryRef | None = None
    subcategories: list[CategoryRef] = Field(default_factory=list)


@router.post("", status_code=HTTP_201_CREATED, response_model=DataMessageEnvelope[CategoryDetailOut])
async def create_category(
    body: CategoryCreateRequest,
    session: AsyncSession = Depends(db_session),
) -> DataMessageEnvelope[CategoryDetailOut]:
    category = await CategoryService(session=session).create_category(body.model_dump())
    return DataMessageEnvelope[CategoryDetailOut](
        data=CategoryDetailOut.model_validate(category),
        message="Category created successfully",
    )


@router.get("", response_model=DataEnvelope[list[CategoryOut]])
async def list_categories(
    parent_id: int | None = Query(default=None, alias="parentId"),
    root: bool = Query(default=False),
    session: AsyncSession = Depends(db_session),
) -> DataEnvelope[list[CategoryOut]]:
    categories = await CategoryService(session=session).list_categories(
        parent_id=parent_id, roots_only=root
    )
    return DataEnvelope[list[CategoryOut]](
        data=[CategoryOut.model_validate(c) for c in categories]
    )


@router.get("/{category_id}", response_model=DataEnvelope[CategoryDetailOut])
async def get_category(
    category_id: int,
    session: AsyncSession = Depends(db_session),
) -> DataEnvelope[CategoryDetailOut]:
    category = await CategoryService(session=session).get_category(category_id)
    return DataEnvelope[CategoryDetailOut](data=CategoryDetailOut.model_validate(category))


@router.put("/{category_id}", response_model=DataMessageEnvelope[CategoryDetailOut])
async def update_category(
    category_id: int,
    body: CategoryUpdateRequest,
    session: AsyncSession = Depends(db_session),
) -> DataMessageEnvelope[CategoryDetailOut]:
    category = await CategoryService(session=session).update_category(
        category_id, body.model_dump(exclude_unset=True)
    )
    return DataMessageEnvelope[CategoryDetailOut](
        data=CategoryDetailOut.model_validate(category),
        message="Category updated successfully",
    )


@router.delete("/{category_id}", response_model=MessageEnvelope)
async def delete_category(
    category_id: int,
    session: AsyncSession = Depends(db_session),
) -> MessageEnvelope:
    message = await CategoryService(session=session).delete_category(category_id)
    return MessageEnvelope(message=message)
