from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cat_registry.core.config import Settings

from .base import Base


class Database:
    """Engine and session factory owned by the running application.

    Built once at startup, kept on ``app.state`` and disposed at shutdown.
    """

    def __init__(self, url: str, **engine_options: Any) -> None:
        engine_options.setdefault("echo", False)
        self.engine: AsyncEngine = create_async_engine(url, future=True, **engine_options)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        return cls(settings.async_database_url, pool_pre_ping=True)

    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> dict:
        """Run a trivial query and report the outcome."""
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as e:
            return {"status": "error", "message": str(e)[:100]}

    async def dispose(self) -> None:
        await self.engine.dispose()
