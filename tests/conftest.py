from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from cat_registry.api.deps import get_database, get_upload_store
from cat_registry.api.main import app
from cat_registry.domain.services.auth_service import hash_password
from cat_registry.infrastructure.db import Database
from cat_registry.infrastructure.db.models import UserRole
from cat_registry.infrastructure.repositories import UserRepository
from cat_registry.infrastructure.storage import UploadStore
from tests.utils import TEST_PASSWORD


@pytest.fixture(scope="session")
def password_hash() -> str:
    """Hash once per session; bcrypt is deliberately slow."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture()
async def database() -> AsyncIterator[Database]:
    database = Database("sqlite+aiosqlite://", poolclass=StaticPool)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture()
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
async def async_client(database: Database, upload_dir: Path) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the app with the test database and upload directory."""
    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_upload_store] = lambda: UploadStore(upload_dir, max_bytes=1024)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.pop(get_database, None)
    app.dependency_overrides.pop(get_upload_store, None)


@pytest.fixture()
async def seeded_users(database: Database, password_hash: str) -> dict[str, str]:
    """Two regular users and one admin, keyed by their ids (u1, u2, u3)."""
    seeds = [
        ("u1", "Alice Owner", "alice@example.com", UserRole.USER),
        ("u2", "Bob Other", "bob@example.com", UserRole.USER),
        ("u3", "Carol Admin", "carol@example.com", UserRole.ADMIN),
    ]
    async with database.session_factory() as session:
        users = UserRepository(session)
        for user_id, user_name, email, role in seeds:
            await users.insert(
                {
                    "id": user_id,
                    "user_name": user_name,
                    "email": email,
                    "hashed_password": password_hash,
                    "role": role,
                }
            )
    return {user_id: email for user_id, _, email, _ in seeds}
