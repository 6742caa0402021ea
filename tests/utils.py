from __future__ import annotations

from typing import Any

from httpx import AsyncClient, Response

from cat_registry.api.deps import issue_smoke_token
from cat_registry.core.auth import Role
from cat_registry.domain import Actor

TEST_PASSWORD = "secret-password"

USERS = {
    "u1": ("Alice Owner", "alice@example.com", Role.USER),
    "u2": ("Bob Other", "bob@example.com", Role.USER),
    "u3": ("Carol Admin", "carol@example.com", Role.ADMIN),
}

CAT_FORM = {
    "cat_name": "Mittens",
    "weight": "4.2",
    "birthdate": "2020-01-01",
    "lat": "60.2",
    "lng": "24.9",
}


def actor(user_id: str) -> Actor:
    user_name, email, role = USERS[user_id]
    return Actor(user_id=user_id, role=role.value, email=email, user_name=user_name)


def auth_headers(user_id: str = "u1") -> dict[str, str]:
    user_name, email, role = USERS[user_id]
    token = issue_smoke_token(user_id, role=role, email=email, user_name=user_name)
    return {"Authorization": f"Bearer {token}"}


async def post_cat(
    client: AsyncClient,
    user_id: str = "u1",
    *,
    files: dict[str, Any] | None = None,
    **overrides: str,
) -> Response:
    """POST /cats as ``user_id`` with the Mittens form, optionally overridden."""
    form = {**CAT_FORM, **overrides}
    return await client.post("/cats", data=form, files=files, headers=auth_headers(user_id))


async def create_cat(client: AsyncClient, user_id: str = "u1", **overrides: str) -> dict[str, Any]:
    response = await post_cat(client, user_id, **overrides)
    assert response.status_code == 201, response.text
    return response.json()["data"]
