from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from cat_registry.domain import Actor, InputValidationError, OwnerSnapshot
from cat_registry.domain.policy import Scope
from cat_registry.domain.shaping import (
    public_cat,
    public_user,
    shape_for_create,
    shape_for_update,
    shape_user_patch,
)

OWNER = Actor(user_id="u1", email="alice@example.com", user_name="Alice Owner")
ADMIN = Actor(user_id="u3", role="admin", email="carol@example.com", user_name="Carol Admin")

CAT_PAYLOAD = {
    "cat_name": "Mittens",
    "weight": 4.2,
    "birthdate": date(2020, 1, 1),
    "location": {"lat": 60.2, "lng": 24.9},
}


def fake_hash(password: str) -> str:
    return f"hashed:{password}"


class TestShapeForCreate:
    def test_owner_comes_from_actor(self) -> None:
        payload = {**CAT_PAYLOAD, "owner": "u2", "owner_id": "u2", "id": "forged", "_id": "x"}

        record = shape_for_create(payload, OWNER, "abc.png")

        assert record["owner_id"] == "u1"
        assert record["owner_user_name"] == "Alice Owner"
        assert record["owner_email"] == "alice@example.com"
        assert record["filename"] == "abc.png"
        assert "id" not in record
        assert (record["lat"], record["lng"]) == (60.2, 24.9)

    def test_snapshot_from_owner_row(self) -> None:
        owner = OwnerSnapshot(id="u1", user_name="Alice Renamed", email="alice.new@example.com")

        record = shape_for_create(CAT_PAYLOAD, OWNER, None, owner=owner)

        assert record["owner_user_name"] == "Alice Renamed"
        assert record["owner_email"] == "alice.new@example.com"

    def test_snapshot_must_belong_to_actor(self) -> None:
        with pytest.raises(ValueError):
            shape_for_create(CAT_PAYLOAD, OWNER, None, owner=OwnerSnapshot("u2", "Bob", "bob@example.com"))

    def test_missing_upload_stores_empty_filename(self) -> None:
        assert shape_for_create(CAT_PAYLOAD, OWNER, None)["filename"] == ""

    def test_missing_fields_are_all_reported(self) -> None:
        with pytest.raises(InputValidationError) as exc_info:
            shape_for_create({"cat_name": "Mittens"}, OWNER, None)

        fields = {error.field for error in exc_info.value.errors}
        assert fields == {"weight", "birthdate", "location"}


class TestShapeForUpdate:
    def test_owner_id_dropped_for_regular_user(self) -> None:
        patch = shape_for_update({"weight": 5.0, "owner_id": "u2"}, OWNER, scope=Scope.OWN)

        assert patch == {"weight": 5.0}

    def test_owner_id_dropped_for_admin_on_self_variant(self) -> None:
        patch = shape_for_update({"weight": 5.0, "owner_id": "u2"}, ADMIN, scope=Scope.OWN)

        assert "owner_id" not in patch

    def test_admin_variant_keeps_owner_id(self) -> None:
        patch = shape_for_update({"owner_id": "u2"}, ADMIN, scope=Scope.ANY)

        assert patch == {"owner_id": "u2"}

    def test_location_is_flattened(self) -> None:
        patch = shape_for_update({"location": {"lat": 1.0, "lng": 2.0}}, OWNER, scope=Scope.OWN)

        assert patch == {"lat": 1.0, "lng": 2.0}

    def test_empty_patch_is_rejected(self) -> None:
        with pytest.raises(InputValidationError):
            shape_for_update({"owner_id": "u2", "filename": "x.png"}, OWNER, scope=Scope.OWN)


class TestShapeUserPatch:
    def test_password_is_hashed(self) -> None:
        patch = shape_user_patch({"password": "hunter22"}, OWNER, scope=Scope.OWN, hash_password=fake_hash)

        assert patch == {"hashed_password": "hashed:hunter22"}

    def test_email_is_lowercased(self) -> None:
        patch = shape_user_patch(
            {"email": "Alice@Example.com"}, OWNER, scope=Scope.OWN, hash_password=fake_hash
        )

        assert patch["email"] == "alice@example.com"

    def test_role_ignored_for_regular_user(self) -> None:
        patch = shape_user_patch(
            {"user_name": "Alice", "role": "admin"}, OWNER, scope=Scope.OWN, hash_password=fake_hash
        )

        assert patch == {"user_name": "Alice"}

    def test_admin_variant_accepts_role(self) -> None:
        patch = shape_user_patch({"role": "admin"}, ADMIN, scope=Scope.ANY, hash_password=fake_hash)

        assert patch == {"role": "admin"}


def test_public_user_is_redacted() -> None:
    user = SimpleNamespace(
        id="u1",
        user_name="Alice Owner",
        email="alice@example.com",
        hashed_password="$2b$12$secret",
        role="admin",
    )

    assert public_user(user) == {"id": "u1", "user_name": "Alice Owner", "email": "alice@example.com"}


def test_public_cat_nests_location_and_owner() -> None:
    cat = SimpleNamespace(
        id="c1",
        cat_name="Mittens",
        weight=4.2,
        filename="",
        birthdate=date(2020, 1, 1),
        lat=60.2,
        lng=24.9,
        owner_id="u1",
        owner_user_name="Alice Owner",
        owner_email="alice@example.com",
    )

    shaped = public_cat(cat)

    assert shaped["location"] == {"lat": 60.2, "lng": 24.9}
    assert shaped["owner"] == {"id": "u1", "user_name": "Alice Owner", "email": "alice@example.com"}
