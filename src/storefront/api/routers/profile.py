"""
storefront.api.routers.profile

Authenticated profile and address endpoints of the user service.

Responsibilities:
- Resolve the caller from the bearer token (`auth.deps.get_principal`).
- Read/update the caller's profile; add/list their addresses.
- Admin-only check endpoint guarded by the role gate.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from storefront.api.deps import db_session, settings_dep
from storefront.api.schemas import CamelModel, DataEnvelope, MessageEnvelope
from storefront.auth.deps import get_principal, require_roles
from storefront.auth.models import Principal
from storefront.db.models import UserRole
from storefront.services.user_service import UserService
from storefront.settings import Settings

# Every route requires a valid bearer token.
router = APIRouter(prefix="/profile", tags=["profile"], dependencies=[Depends(get_principal)])


class AddressIn(CamelModel):
    line1: str = Field(min_length=1, max_length=255)
    line2: str | None = Field(default=None, max_length=255)
    city: str = Field(min_length=1, max_length=128)
    state: str = Field(min_length=1, max_length=128)
    zip: str = Field(min_length=1, max_length=32)
    country: str = Field(min_length=1, max_length=128)


class AddressOut(CamelModel):
    id: int
    user_id: int
    line1: str
    line2: str | None = None
    city: str
    state: str
    zip: str
    country: str
    created_at: datetime


class ProfileOut(CamelModel):
    id: int
    email: str
    name: str
    role: UserRole
    is_verified: bool
    addresses: list[AddressOut] = Field(default_factory=list)


class ProfileUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    role: UserRole | None = None


@router.get("", response_model=DataEnvelope[ProfileOut])
async def get_profile(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> DataEnvelope[ProfileOut]:
    user = await UserService(session=session, settings=settings).get_profile(principal.user_id)
    return DataEnvelope[ProfileOut](data=ProfileOut.model_validate(user))


@router.put("", response_model=DataEnvelope[ProfileOut])
async def update_profile(
    body: ProfileUpdateRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> DataEnvelope[ProfileOut]:
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    user = await UserService(session=session, settings=settings).update_profile(principal, changes)
    return DataEnvelope[ProfileOut](data=ProfileOut.model_validate(user))


@router.post("/addresses", status_code=HTTP_201_CREATED, response_model=DataEnvelope[AddressOut])
async def add_address(
    body: AddressIn,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> DataEnvelope[AddressOut]:
    address = await UserService(session=session, settings=settings).add_address(
        principal.user_id, body.model_dump()
    )
    return DataEnvelope[AddressOut](data=AddressOut.model_validate(address))


@router.get("/addresses", response_model=DataEnvelope[list[AddressOut]])
async def list_addresses(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> DataEnvelope[list[AddressOut]]:
    addresses = await UserService(session=session, settings=settings).list_addresses(
        principal.user_id
    )
    return DataEnvelope[list[AddressOut]](data=[AddressOut.model_validate(a) for a in addresses])


@router.get("/admin", response_model=MessageEnvelope)
async def admin_check(
    _: Principal = Depends(require_roles(UserRole.admin.value)),
) -> MessageEnvelope:
    return MessageEnvelope(message="Admin access granted")
