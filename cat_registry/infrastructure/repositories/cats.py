from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.domain.models import CoordinateRange
from cat_registry.domain.policy import ScopedFilter
from cat_registry.infrastructure.db.models import CatModel

from .base import require_key, store_errors

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select


class CatRepository:
    """Cats table access; every filter comes from ``authorize``."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find(
        self,
        scoped: ScopedFilter | None = None,
        *,
        area: CoordinateRange | None = None,
    ) -> list[CatModel]:
        stmt: Select[tuple[CatModel]] = (
            select(CatModel)
            .where(*self._conditions(scoped or ScopedFilter()))
            .order_by(CatModel.created_at, CatModel.id)
        )
        if area is not None:
            stmt = stmt.where(
                CatModel.lat.between(area.lat_min, area.lat_max),
                CatModel.lng.between(area.lng_min, area.lng_max),
            )
        async with store_errors(self.session, "Cat"):
            return list((await self.session.scalars(stmt)).all())

    async def find_one(self, scoped: ScopedFilter) -> CatModel | None:
        stmt = (
            select(CatModel)
            .where(*self._conditions(scoped))
            .execution_options(populate_existing=True)
        )
        async with store_errors(self.session, "Cat"):
            return await self.session.scalar(stmt)

    async def insert(self, record: dict[str, Any]) -> str:
        cat = CatModel(**record)
        async with store_errors(self.session, "Cat"):
            self.session.add(cat)
            await self.session.commit()
            await self.session.refresh(cat)
        return cat.id

    async def update_matching(self, scoped: ScopedFilter, patch: dict[str, Any]) -> int:
        require_key(scoped)
        stmt = (
            update(CatModel)
            .where(*self._conditions(scoped))
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        async with store_errors(self.session, "Cat"):
            result = await self.session.execute(stmt)
            await self.session.commit()
        return result.rowcount

    async def delete_matching(self, scoped: ScopedFilter) -> int:
        require_key(scoped)
        stmt = (
            delete(CatModel)
            .where(*self._conditions(scoped))
            .execution_options(synchronize_session=False)
        )
        async with store_errors(self.session, "Cat"):
            result = await self.session.execute(stmt)
            await self.session.commit()
        return result.rowcount

    @staticmethod
    def _conditions(scoped: ScopedFilter) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if scoped.resource_id is not None:
            conditions.append(CatModel.id == scoped.resource_id)
        if scoped.owner_id is not None:
            conditions.append(CatModel.owner_id == scoped.owner_id)
        return conditions
