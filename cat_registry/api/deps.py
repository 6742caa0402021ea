from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.core.auth import Role, create_access_token
from cat_registry.core.config import get_settings
from cat_registry.domain import Actor
from cat_registry.domain.services.auth_service import AuthService
from cat_registry.infrastructure.db import Database
from cat_registry.infrastructure.storage import UploadStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db_session(
    database: Database = Depends(get_database),  # noqa: B008
) -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in database.session():
        yield session


async def get_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> Actor | None:
    """Resolve the caller; ``None`` when no bearer token was sent.

    A token that is present but invalid, or whose user no longer exists, is
    rejected outright rather than downgraded to an anonymous caller.
    """
    if credentials is None:
        return None
    return await AuthService(session).resolve_actor(credentials.credentials)


def get_upload_store() -> UploadStore:
    return UploadStore.from_settings(get_settings())


def issue_smoke_token(
    user_id: str,
    *,
    role: Role,
    email: str | None = None,
    user_name: str | None = None,
) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_access_token(user_id, role=role.value, email=email, user_name=user_name)
