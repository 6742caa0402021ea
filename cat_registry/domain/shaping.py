"""Turn client payloads into store records, and store rows into public output.

Write payloads arrive as plain mappings (already parsed by the API schemas).
Server-managed fields are never copied from them: ids, version markers, the
owner and the uploaded filename are always injected here.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from cat_registry.domain.errors import FieldError, InputValidationError
from cat_registry.domain.models import Actor, OwnerSnapshot
from cat_registry.domain.policy import Scope

SERVER_MANAGED_FIELDS = frozenset(
    {"id", "_id", "__v", "version", "owner", "owner_id", "filename", "created_at", "updated_at"}
)
CAT_REQUIRED_FIELDS = ("cat_name", "weight", "birthdate", "location")
CAT_PATCH_FIELDS = ("cat_name", "weight", "birthdate", "location")
USER_PATCH_FIELDS = ("user_name", "email", "password")


def shape_for_create(
    payload: Mapping[str, Any],
    actor: Actor,
    upload_ref: str | None,
    *,
    owner: OwnerSnapshot | None = None,
) -> dict[str, Any]:
    """Build a cat record owned by ``actor``; any client-sent owner is dropped.

    ``owner`` is the actor's current user row; without it the snapshot falls
    back to the identity carried by ``actor``.
    """
    if owner is None:
        owner = OwnerSnapshot(id=actor.user_id, user_name=actor.user_name, email=actor.email)
    if owner.id != actor.user_id:
        raise ValueError("a new cat is always owned by its creator")

    data = {key: value for key, value in payload.items() if key not in SERVER_MANAGED_FIELDS}

    errors = [
        FieldError(field=field, message="field required")
        for field in CAT_REQUIRED_FIELDS
        if data.get(field) is None
    ]
    if errors:
        raise InputValidationError(errors)

    record: dict[str, Any] = {
        "cat_name": data["cat_name"],
        "weight": data["weight"],
        "birthdate": data["birthdate"],
        "filename": upload_ref or "",
    }
    record.update(owner_fields(owner))
    record.update(_flatten_location(data["location"]))
    return record


def shape_for_update(payload: Mapping[str, Any], actor: Actor, *, scope: Scope) -> dict[str, Any]:
    """Build a cat patch from the fields the client actually set.

    ``owner_id`` survives only for an admin calling the admin variant; the
    caller resolves it into a fresh owner snapshot.
    """
    allowed = CAT_PATCH_FIELDS
    if actor.is_admin and scope is Scope.ANY:
        allowed = (*CAT_PATCH_FIELDS, "owner_id")

    patch: dict[str, Any] = {}
    for field in allowed:
        value = payload.get(field)
        if value is None:
            continue
        if field == "location":
            patch.update(_flatten_location(value))
        else:
            patch[field] = value

    if not patch:
        raise InputValidationError.single("body", "no updatable fields supplied")
    return patch


def shape_user_patch(
    payload: Mapping[str, Any],
    actor: Actor,
    *,
    scope: Scope,
    hash_password: Callable[[str], str],
) -> dict[str, Any]:
    """Build a user patch; passwords are hashed, roles only change via an admin."""
    allowed = USER_PATCH_FIELDS
    if actor.is_admin and scope is Scope.ANY:
        allowed = (*USER_PATCH_FIELDS, "role")

    patch: dict[str, Any] = {}
    for field in allowed:
        value = payload.get(field)
        if value is None:
            continue
        if field == "password":
            patch["hashed_password"] = hash_password(value)
        elif field == "email":
            patch["email"] = value.lower()
        elif field == "role":
            patch["role"] = getattr(value, "value", value)
        else:
            patch[field] = value

    if not patch:
        raise InputValidationError.single("body", "no updatable fields supplied")
    return patch


def owner_fields(owner: OwnerSnapshot) -> dict[str, str]:
    """Columns that denormalize the owner onto a cat row."""
    return {"owner_id": owner.id, "owner_user_name": owner.user_name, "owner_email": owner.email}


def public_user(user: Any) -> dict[str, Any]:
    """Redacted user projection: never carries the password hash or the role."""
    return {"id": user.id, "user_name": user.user_name, "email": user.email}


def public_cat(cat: Any) -> dict[str, Any]:
    return {
        "id": cat.id,
        "cat_name": cat.cat_name,
        "weight": cat.weight,
        "filename": cat.filename,
        "birthdate": cat.birthdate,
        "location": {"lat": cat.lat, "lng": cat.lng},
        "owner": {"id": cat.owner_id, "user_name": cat.owner_user_name, "email": cat.owner_email},
    }


def _flatten_location(location: Any) -> dict[str, float]:
    if isinstance(location, Mapping):
        return {"lat": location["lat"], "lng": location["lng"]}
    return {"lat": location.lat, "lng": location.lng}
