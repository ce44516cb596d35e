"""
storefront.services.user_service

User registration, login and profile management.

Responsibilities:
- Register users with hashed passwords and reject duplicate emails.
- Verify credentials and issue access tokens.
- Read/update the caller's profile and manage their addresses.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.auth.jwt import JwtConfig, issue_token
from storefront.auth.models import Principal
from storefront.auth.passwords import hash_password, verify_password
from storefront.db.models import Address, User, UserRole
from storefront.db.repositories.users import AddressRepo, UserRepo
from storefront.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDenied,
    ValidationFailed,
)
from storefront.observability.logging import get_logger
from storefront.settings import Settings

log = get_logger(__name__)


class UserService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)
        self._addresses = AddressRepo(session)

    async def register(
        self,
        *,
        email: str,
        password: str,
        name: str,
        role: UserRole = UserRole.customer,
    ) -> User:
        email = email.strip().lower()
        if await self._users.get_by_email(email) is not None:
            raise ConflictError("Email already registered")

        user = await self._users.create(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
        )
        await self._session.commit()
        log.info("user_registered", user_id=user.id, role=user.role.value)
        return user

    async def login(self, *, email: str, password: str) -> str:
        user = await self._users.get_by_email(email.strip())
        if user is None or not verify_password(password, user.password_hash):
            log.info("login_failed")
            raise AuthenticationError("Invalid credentials")

        token = issue_token(
            cfg=JwtConfig.from_settings(self._settings),
            subject=str(user.id),
            email=user.email,
            role=user.role.value,
            ttl=timedelta(minutes=self._settings.jwt_ttl_minutes),
        )
        log.info("login_succeeded", user_id=user.id)
        return token

    async def get_profile(self, user_id: int) -> User:
        user = await self._users.get_with_addresses(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(self, principal: Principal, changes: dict[str, Any]) -> User:
        user = await self._users.get(principal.user_id)
        if user is None:
            raise NotFoundError("User not found")

        if "name" in changes:
            if not changes["name"]:
                raise ValidationFailed("Name is required")
            user.name = changes["name"]
        if "role" in changes and changes["role"] != user.role:
            # Checked against the stored role; token claims may be stale.
            if user.role != UserRole.admin:
                raise PermissionDenied("Forbidden")
            user.role = UserRole(changes["role"])

        await self._session.commit()
        log.info("profile_updated", user_id=user.id, fields=sorted(changes))
        return await self.get_profile(user.id)

    async def add_address(self, user_id: int, data: dict[str, Any]) -> Address:
        if await self._users.get(user_id) is None:
            raise NotFoundError("User not found")

        address = await self._addresses.create(user_id=user_id, **data)
        await self._session.commit()
        log.info("address_added", user_id=user_id, address_id=address.id)
        return address

    async def list_addresses(self, user_id: int) -> list[Address]:
        return await self._addresses.list_for_user(user_id)
