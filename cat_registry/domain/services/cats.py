from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.domain.errors import CrudError, InputValidationError, NotFoundError, UnauthenticatedError
from cat_registry.domain.models import Actor, CoordinateRange, OwnerSnapshot
from cat_registry.domain.policy import Operation, Scope, ScopedFilter, authorize
from cat_registry.domain.shaping import owner_fields, public_cat, shape_for_create, shape_for_update
from cat_registry.infrastructure.repositories import CatRepository, UserRepository
from cat_registry.infrastructure.storage import UploadStore

logger = structlog.get_logger()


class CatService:
    """Cat listing and owner-scoped mutations.

    Writes go through ``authorize`` and hand its filter to a single
    ``UPDATE``/``DELETE``; zero affected rows means "not found", whether the
    id is unknown or belongs to someone else.
    """

    def __init__(self, session: AsyncSession, *, uploads: UploadStore | None = None) -> None:
        self.cats = CatRepository(session)
        self.users = UserRepository(session)
        self.uploads = uploads

    async def list_cats(self) -> list[dict[str, Any]]:
        decision = authorize(None, Operation.READ, scope=Scope.PUBLIC)
        return [public_cat(cat) for cat in await self.cats.find(decision.effective_filter)]

    async def get_cat(self, cat_id: str) -> dict[str, Any]:
        decision = authorize(None, Operation.READ, scope=Scope.PUBLIC, resource_id=cat_id)
        cat = await self.cats.find_one(decision.effective_filter)
        if cat is None:
            raise NotFoundError("Cat not found")
        return public_cat(cat)

    async def list_cats_by_owner(self, owner_id: str) -> list[dict[str, Any]]:
        decision = authorize(None, Operation.READ, scope=Scope.PUBLIC, owner_id=owner_id)
        cats = await self.cats.find(decision.effective_filter)
        return [public_cat(cat) for cat in cats]

    async def list_own_cats(self, actor: Actor | None) -> list[dict[str, Any]]:
        decision = authorize(actor, Operation.READ, scope=Scope.OWN)
        return [public_cat(cat) for cat in await self.cats.find(decision.effective_filter)]

    async def list_cats_in_area(self, area: CoordinateRange) -> list[dict[str, Any]]:
        """Cats inside an inclusive box; an inverted box matches nothing."""
        if area.is_empty:
            return []

        decision = authorize(None, Operation.READ, scope=Scope.PUBLIC)
        cats = await self.cats.find(decision.effective_filter, area=area)
        return [public_cat(cat) for cat in cats]

    async def create_cat(
        self,
        actor: Actor | None,
        payload: Mapping[str, Any],
        *,
        upload: UploadFile | None = None,
        upload_ref: str | None = None,
    ) -> dict[str, Any]:
        """Create a cat owned by ``actor``.

        The owner snapshot is read from the actor's user row; an actor whose
        account is gone cannot create. The image is stored only after both
        checks pass, and removed again if the insert fails.
        """
        authorize(actor, Operation.CREATE)
        owner = await self._owner_snapshot(actor.user_id)
        if owner is None:
            raise UnauthenticatedError("Account no longer exists")

        stored_upload = ""
        if upload is not None:
            if self.uploads is None:
                raise ValueError("an UploadStore is required to accept uploads")
            stored_upload = upload_ref = await self.uploads.save(upload)

        try:
            record = shape_for_create(payload, actor, upload_ref, owner=owner)
            cat_id = await self.cats.insert(record)
        except CrudError:
            if stored_upload:
                await self.uploads.discard(stored_upload)
            raise
        cat = await self.cats.find_one(ScopedFilter(resource_id=cat_id))

        await logger.ainfo("cat_created", cat_id=cat_id, owner_id=owner.id, filename=record["filename"])
        return public_cat(cat)

    async def update_cat(
        self,
        actor: Actor | None,
        cat_id: str,
        payload: Mapping[str, Any],
        *,
        scope: Scope = Scope.OWN,
    ) -> dict[str, Any]:
        decision = authorize(actor, Operation.UPDATE, scope=scope, resource_id=cat_id, resource="Cat")
        patch = shape_for_update(payload, actor, scope=scope)

        if "owner_id" in patch:
            owner = await self._owner_snapshot(patch["owner_id"])
            if owner is None:
                raise InputValidationError.single("owner_id", "owner does not exist")
            patch.update(owner_fields(owner))

        affected = await self.cats.update_matching(decision.effective_filter, patch)
        if not affected:
            raise NotFoundError("Cat not found")

        cat = await self.cats.find_one(ScopedFilter(resource_id=cat_id))
        if cat is None:
            raise NotFoundError("Cat not found")

        await logger.ainfo(
            "cat_updated",
            cat_id=cat_id,
            actor_id=actor.user_id,
            scope=scope.value,
            updated_fields=sorted(patch),
            reassigned="owner_id" in patch,
        )
        return public_cat(cat)

    async def delete_cat(self, actor: Actor | None, cat_id: str, *, scope: Scope = Scope.OWN) -> dict[str, Any]:
        decision = authorize(actor, Operation.DELETE, scope=scope, resource_id=cat_id, resource="Cat")

        affected = await self.cats.delete_matching(decision.effective_filter)
        if not affected:
            raise NotFoundError("Cat not found")

        await logger.ainfo("cat_deleted", cat_id=cat_id, actor_id=actor.user_id, scope=scope.value)
        return {"id": cat_id}

    async def _owner_snapshot(self, user_id: str) -> OwnerSnapshot | None:
        user = await self.users.find_one(ScopedFilter(resource_id=user_id))
        if user is None:
            return None
        return OwnerSnapshot(id=user.id, user_name=user.user_name, email=user.email)
