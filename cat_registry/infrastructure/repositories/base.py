from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.domain.errors import ConflictError, StoreUnavailableError
from cat_registry.domain.policy import ScopedFilter

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def store_errors(session: AsyncSession, entity: str) -> AsyncIterator[None]:
    """Translate SQLAlchemy failures into domain errors; nothing is retried."""
    try:
        yield
    except IntegrityError as exc:
        await session.rollback()
        await logger.awarning("store_conflict", entity=entity)
        raise ConflictError(f"{entity} conflicts with an existing record") from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        await logger.aerror("store_failure", entity=entity, error=str(exc)[:200])
        raise StoreUnavailableError("Database unavailable") from exc


def require_key(scoped: ScopedFilter) -> None:
    """Writes always target one resource id."""
    if scoped.resource_id is None:
        raise ValueError("refusing to write without a resource id")
