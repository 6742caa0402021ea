"""Owner-or-admin authorization for every owned resource.

``authorize`` is the only place that decides who may touch what. Its result is
a filter, not a yes/no answer: callers hand the filter to the store so the
ownership condition lands in the same ``UPDATE``/``DELETE`` statement that
performs the write.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from cat_registry.domain.errors import ForbiddenError, NotFoundError, UnauthenticatedError
from cat_registry.domain.models import Actor

logger = structlog.get_logger(__name__)


class Operation(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Scope(str, Enum):
    """Endpoint variant the request arrived through."""

    PUBLIC = "public"
    OWN = "own"
    ANY = "any"


@dataclass(slots=True, frozen=True)
class ScopedFilter:
    """Lookup key and ownership constraint, applied together by the store.

    ``owner_id`` is ``None`` when no ownership constraint applies (admins and
    unfiltered public reads).
    """

    resource_id: str | None = None
    owner_id: str | None = None


@dataclass(slots=True, frozen=True)
class Decision:
    permit: bool
    effective_filter: ScopedFilter


def authorize(
    actor: Actor | None,
    operation: Operation,
    *,
    scope: Scope = Scope.OWN,
    resource_id: str | None = None,
    owner_id: str | None = None,
    resource: str = "Resource",
) -> Decision:
    """Decide whether ``actor`` may perform ``operation`` and on which rows.

    ``owner_id`` is the resource's current owner when the caller already holds
    the record; leave it out to let the returned filter enforce ownership. On
    a public read it narrows the listing to that owner's resources.
    A non-admin aimed at someone else's resource gets ``NotFoundError``, the
    same outcome as an unknown id.
    """
    if scope is Scope.PUBLIC:
        if operation is not Operation.READ:
            raise ValueError(f"{operation.value} cannot use the public scope")
        return Decision(
            permit=True,
            effective_filter=ScopedFilter(resource_id=resource_id, owner_id=owner_id),
        )

    if actor is None:
        logger.info("authorization_denied", reason="anonymous", operation=operation.value)
        raise UnauthenticatedError("Authentication required")

    if operation is Operation.CREATE:
        return Decision(permit=True, effective_filter=ScopedFilter(owner_id=actor.user_id))

    if operation in (Operation.UPDATE, Operation.DELETE) and resource_id is None:
        raise ValueError(f"{operation.value} requires a resource id")

    if scope is Scope.ANY:
        if not actor.is_admin:
            logger.info(
                "authorization_denied",
                reason="admin_only",
                operation=operation.value,
                user_id=actor.user_id,
            )
            raise ForbiddenError("Admin only")
        return Decision(permit=True, effective_filter=ScopedFilter(resource_id=resource_id))

    if operation is Operation.READ:
        return Decision(
            permit=True,
            effective_filter=ScopedFilter(resource_id=resource_id, owner_id=actor.user_id),
        )

    if actor.is_admin:
        return Decision(permit=True, effective_filter=ScopedFilter(resource_id=resource_id))

    if owner_id is not None and owner_id != actor.user_id:
        logger.info(
            "authorization_denied",
            reason="not_owner",
            operation=operation.value,
            user_id=actor.user_id,
            resource_id=resource_id,
        )
        raise NotFoundError(f"{resource} not found")

    return Decision(
        permit=True,
        effective_filter=ScopedFilter(resource_id=resource_id, owner_id=actor.user_id),
    )
