"""
storefront.api.routers.auth

Registration and login endpoints of the user service.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from storefront.api.deps import db_session, settings_dep
from storefront.api.schemas import CamelModel, DataEnvelope
from storefront.db.models import UserRole
from storefront.services.user_service import UserService
from storefront.settings import Settings

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)
    name: str = Field(min_length=2, max_length=100)
    role: UserRole = UserRole.customer


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisteredUser(CamelModel):
    id: int
    email: str
    name: str
    role: UserRole


class TokenResponse(BaseModel):
    success: bool = True
    token: str


@router.post("/register", status_code=HTTP_201_CREATED, response_model=DataEnvelope[RegisteredUser])
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> DataEnvelope[RegisteredUser]:
    user = await UserService(session=session, settings=settings).register(
        email=body.email,
        password=body.password,
        name=body.name,
        role=body.role,
    )
    return DataEnvelope[RegisteredUser](data=RegisteredUser.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> TokenResponse:
    token = await UserService(session=session, settings=settings).login(
        email=body.email, password=body.password
    )
    return TokenResponse(token=token)
