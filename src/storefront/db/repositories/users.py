"""
storefront.db.repositories.users

Repositories for `User` and `Address` entities.

Responsibilities:
- Look users up by id or (case-insensitive) email.
- Create users and addresses; addresses are always scoped to their owner.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.db.models import Address, User, UserRole


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: UserRole = UserRole.customer,
    ) -> User:
        user = User(email=email, password_hash=password_hash, name=name, role=role)
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def get_with_addresses(self, user_id: int) -> User | None:
        stmt = (
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.addresses))
            .execution_options(populate_existing=True)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return (await self._session.execute(stmt)).scalar_one_or_none()


class AddressRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, user_id: int, **fields: Any) -> Address:
        address = Address(user_id=user_id, **fields)
        self._session.add(address)
        await self._session.flush()
        return address

    async def list_for_user(self, user_id: int) -> list[Address]:
        stmt = select(Address).where(Address.user_id == user_id).order_by(Address.id)
        return list((await self._session.execute(stmt)).scalars().all())
