from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.domain.policy import ScopedFilter
from cat_registry.infrastructure.db.models import UserModel

from .base import require_key, store_errors

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class UserRepository:
    """Users table access. A user is its own owner, so both filter keys hit ``id``."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find(self, scoped: ScopedFilter | None = None) -> list[UserModel]:
        stmt = (
            select(UserModel)
            .where(*self._conditions(scoped or ScopedFilter()))
            .order_by(UserModel.created_at, UserModel.id)
        )
        async with store_errors(self.session, "User"):
            return list((await self.session.scalars(stmt)).all())

    async def find_one(self, scoped: ScopedFilter) -> UserModel | None:
        stmt = (
            select(UserModel)
            .where(*self._conditions(scoped))
            .execution_options(populate_existing=True)
        )
        async with store_errors(self.session, "User"):
            return await self.session.scalar(stmt)

    async def find_by_email(self, email: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.email == email.lower())
        async with store_errors(self.session, "User"):
            return await self.session.scalar(stmt)

    async def insert(self, record: dict[str, Any]) -> str:
        user = UserModel(**record)
        async with store_errors(self.session, "User"):
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        return user.id

    async def update_matching(self, scoped: ScopedFilter, patch: dict[str, Any]) -> int:
        require_key(scoped)
        stmt = (
            update(UserModel)
            .where(*self._conditions(scoped))
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        async with store_errors(self.session, "User"):
            result = await self.session.execute(stmt)
            await self.session.commit()
        return result.rowcount

    async def delete_matching(self, scoped: ScopedFilter) -> int:
        require_key(scoped)
        stmt = (
            delete(UserModel)
            .where(*self._conditions(scoped))
            .execution_options(synchronize_session=False)
        )
        async with store_errors(self.session, "User"):
            result = await self.session.execute(stmt)
            await self.session.commit()
        return result.rowcount

    @staticmethod
    def _conditions(scoped: ScopedFilter) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if scoped.resource_id is not None:
            conditions.append(UserModel.id == scoped.resource_id)
        if scoped.owner_id is not None:
            conditions.append(UserModel.id == scoped.owner_id)
        return conditions
