from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.domain.errors import ConflictError, NotFoundError
from cat_registry.domain.models import Actor
from cat_registry.domain.policy import Operation, Scope, ScopedFilter, authorize
from cat_registry.domain.services.auth_service import hash_password
from cat_registry.domain.shaping import public_user, shape_user_patch
from cat_registry.infrastructure.db.models import UserRole
from cat_registry.infrastructure.repositories import UserRepository

logger = structlog.get_logger()


class UserService:
    """User reads and owner-or-admin mutations. Every read is redacted."""

    def __init__(self, session: AsyncSession) -> None:
        self.users = UserRepository(session)

    async def list_users(self) -> list[dict[str, Any]]:
        decision = authorize(None, Operation.READ, scope=Scope.PUBLIC)
        return [public_user(user) for user in await self.users.find(decision.effective_filter)]

    async def get_user(self, user_id: str) -> dict[str, Any]:
        decision = authorize(None, Operation.READ, scope=Scope.PUBLIC, resource_id=user_id)
        user = await self.users.find_one(decision.effective_filter)
        if user is None:
            raise NotFoundError("User not found")
        return public_user(user)

    async def check_token(self, actor: Actor | None) -> dict[str, Any]:
        """Echo the identity behind the token, as resolved from the current user row."""
        authorize(actor, Operation.READ, scope=Scope.OWN)
        return {"id": actor.user_id, "user_name": actor.user_name, "email": actor.email}

    async def update_user(
        self,
        actor: Actor | None,
        payload: Mapping[str, Any],
        *,
        scope: Scope,
        user_id: str | None = None,
    ) -> dict[str, Any]:
        """Update the caller (``Scope.OWN``) or any user as an admin (``Scope.ANY``)."""
        target = self._target(actor, scope, user_id)
        decision = authorize(actor, Operation.UPDATE, scope=scope, resource_id=target, resource="User")

        patch = shape_user_patch(payload, actor, scope=scope, hash_password=hash_password)
        if "role" in patch:
            patch["role"] = UserRole(patch["role"])

        try:
            affected = await self.users.update_matching(decision.effective_filter, patch)
        except ConflictError as exc:
            raise ConflictError("Email already in use") from exc
        if not affected:
            raise NotFoundError("User not found")

        user = await self.users.find_one(ScopedFilter(resource_id=target))
        if user is None:
            raise NotFoundError("User not found")

        await logger.ainfo(
            "user_updated",
            user_id=target,
            actor_id=actor.user_id,
            scope=scope.value,
            updated_fields=sorted(patch),
        )
        return public_user(user)

    async def delete_user(
        self,
        actor: Actor | None,
        *,
        scope: Scope,
        user_id: str | None = None,
    ) -> dict[str, Any]:
        """Delete a user. Their cats stay in place."""
        target = self._target(actor, scope, user_id)
        decision = authorize(actor, Operation.DELETE, scope=scope, resource_id=target, resource="User")

        user = await self.users.find_one(decision.effective_filter)
        affected = await self.users.delete_matching(decision.effective_filter)
        if not affected or user is None:
            raise NotFoundError("User not found")

        await logger.ainfo("user_deleted", user_id=target, actor_id=actor.user_id, scope=scope.value)
        return public_user(user)

    @staticmethod
    def _target(actor: Actor | None, scope: Scope, user_id: str | None) -> str | None:
        if scope is Scope.ANY:
            return user_id
        return actor.user_id if actor is not None else None
