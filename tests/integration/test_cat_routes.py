"""Integration tests for cat listing, creation and owner-scoped writes."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.utils import auth_headers, create_cat, post_cat

pytestmark = pytest.mark.usefixtures("seeded_users")

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestCreateCat:
    @pytest.mark.asyncio
    async def test_create_sets_owner_from_token(self, async_client: AsyncClient) -> None:
        response = await post_cat(async_client, "u1", owner="u2", owner_id="u2")

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["message"] == "Cat created"
        assert body["data"]["owner"] == {
            "id": "u1",
            "user_name": "Alice Owner",
            "email": "alice@example.com",
        }
        assert body["data"]["location"] == {"lat": 60.2, "lng": 24.9}
        assert body["data"]["filename"] == ""

    @pytest.mark.asyncio
    async def test_create_stores_upload(self, async_client: AsyncClient, upload_dir: Path) -> None:
        response = await post_cat(
            async_client, "u1", files={"file": ("mittens.PNG", PNG_BYTES, "image/png")}
        )

        assert response.status_code == status.HTTP_201_CREATED
        filename = response.json()["data"]["filename"]
        assert filename.endswith(".png")
        assert (upload_dir / filename).read_bytes() == PNG_BYTES

    @pytest.mark.asyncio
    async def test_non_image_upload_rejected(self, async_client: AsyncClient, upload_dir: Path) -> None:
        response = await post_cat(
            async_client, "u1", files={"file": ("notes.txt", b"meow", "text/plain")}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "file"
        assert not upload_dir.exists()

    @pytest.mark.asyncio
    async def test_oversized_upload_rejected(self, async_client: AsyncClient) -> None:
        response = await post_cat(
            async_client, "u1", files={"file": ("huge.png", b"\x00" * 2048, "image/png")}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_anonymous_create(self, async_client: AsyncClient, upload_dir: Path) -> None:
        response = await async_client.post(
            "/cats",
            data={"cat_name": "Stray", "weight": "3", "birthdate": "2021-05-05", "lat": "0", "lng": "0"},
            files={"file": ("stray.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not upload_dir.exists()

    @pytest.mark.asyncio
    async def test_deleted_account_cannot_create(self, async_client: AsyncClient, upload_dir: Path) -> None:
        await async_client.delete("/users", headers=auth_headers("u1"))

        response = await post_cat(
            async_client, "u1", files={"file": ("mittens.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert (await async_client.get("/cats")).json() == []
        assert not upload_dir.exists()

    @pytest.mark.asyncio
    async def test_snapshot_uses_current_profile(self, async_client: AsyncClient) -> None:
        await async_client.put(
            "/users",
            json={"user_name": "Alice Renamed", "email": "alice.new@example.com"},
            headers=auth_headers("u1"),
        )

        cat = await create_cat(async_client, "u1")

        assert cat["owner"] == {
            "id": "u1",
            "user_name": "Alice Renamed",
            "email": "alice.new@example.com",
        }

    @pytest.mark.asyncio
    async def test_invalid_form_lists_every_field(self, async_client: AsyncClient) -> None:
        response = await post_cat(async_client, "u1", weight="-1", lat="100")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"weight", "lat"}

    @pytest.mark.asyncio
    async def test_future_birthdate_rejected(self, async_client: AsyncClient) -> None:
        response = await post_cat(async_client, "u1", birthdate="2999-01-01")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "birthdate"


class TestReadCats:
    @pytest.mark.asyncio
    async def test_list_and_get(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")

        listed = await async_client.get("/cats")
        fetched = await async_client.get(f"/cats/{cat['id']}")

        assert [item["id"] for item in listed.json()] == [cat["id"]]
        assert fetched.json() == cat

    @pytest.mark.asyncio
    async def test_get_unknown_cat(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/cats/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_own_cats(self, async_client: AsyncClient) -> None:
        mine = await create_cat(async_client, "u1")
        await create_cat(async_client, "u2", cat_name="Felix")

        response = await async_client.get("/cats/user", headers=auth_headers("u1"))

        assert [cat["id"] for cat in response.json()] == [mine["id"]]

    @pytest.mark.asyncio
    async def test_own_cats_requires_token(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/cats/user")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_cats_by_owner(self, async_client: AsyncClient) -> None:
        await create_cat(async_client, "u1")
        felix = await create_cat(async_client, "u2", cat_name="Felix")

        response = await async_client.get("/cats/owner/u2")

        assert [cat["id"] for cat in response.json()] == [felix["id"]]


class TestAreaQuery:
    @pytest.mark.asyncio
    async def test_cats_inside_box(self, async_client: AsyncClient) -> None:
        helsinki = await create_cat(async_client, "u1", lat="60.2", lng="24.9")
        await create_cat(async_client, "u2", lat="10", lng="10")

        response = await async_client.get(
            "/cats/area", params={"topRight": "61,25", "bottomLeft": "60,24"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert [cat["id"] for cat in response.json()] == [helsinki["id"]]

    @pytest.mark.asyncio
    async def test_inverted_box_is_empty(self, async_client: AsyncClient) -> None:
        await create_cat(async_client, "u1", lat="5", lng="5")

        response = await async_client.get(
            "/cats/area", params={"topRight": "0,0", "bottomLeft": "10,10"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_malformed_corners(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/cats/area", params={"topRight": "north", "bottomLeft": "1;2"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = [error["field"] for error in response.json()["errors"]]
        assert fields == ["topRight", "bottomLeft"]


class TestOwnerScopedWrites:
    @pytest.mark.asyncio
    async def test_owner_other_user_and_admin(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")
        url = f"/cats/{cat['id']}"

        other = await async_client.put(url, json={"weight": 9.9}, headers=auth_headers("u2"))
        assert other.status_code == status.HTTP_404_NOT_FOUND
        assert (await async_client.get(url)).json()["weight"] == 4.2

        admin = await async_client.put(url, json={"weight": 5.5}, headers=auth_headers("u3"))
        assert admin.status_code == status.HTTP_200_OK
        assert admin.json()["data"]["weight"] == 5.5

        first = await async_client.delete(url, headers=auth_headers("u1"))
        second = await async_client.delete(url, headers=auth_headers("u1"))
        assert first.status_code == status.HTTP_200_OK
        assert first.json() == {"message": "Cat deleted", "data": {"id": cat["id"]}}
        assert second.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")

        response = await async_client.delete(f"/cats/{cat['id']}", headers=auth_headers("u2"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert (await async_client.get(f"/cats/{cat['id']}")).status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_owner_field_ignored_on_self_variant(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")

        response = await async_client.put(
            f"/cats/{cat['id']}",
            json={"cat_name": "Sir Mittens", "owner_id": "u2"},
            headers=auth_headers("u1"),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["cat_name"] == "Sir Mittens"
        assert response.json()["data"]["owner"]["id"] == "u1"

    @pytest.mark.asyncio
    async def test_location_update(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")

        response = await async_client.put(
            f"/cats/{cat['id']}",
            json={"location": {"lat": -33.9, "lng": 18.4}},
            headers=auth_headers("u1"),
        )

        assert response.json()["data"]["location"] == {"lat": -33.9, "lng": 18.4}

    @pytest.mark.asyncio
    async def test_anonymous_update(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")

        response = await async_client.put(f"/cats/{cat['id']}", json={"weight": 1.0})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestAdminCatVariant:
    @pytest.mark.asyncio
    async def test_admin_reassigns_owner(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")

        response = await async_client.put(
            f"/cats/admin/{cat['id']}", json={"owner_id": "u2"}, headers=auth_headers("u3")
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["owner"] == {
            "id": "u2",
            "user_name": "Bob Other",
            "email": "bob@example.com",
        }
        owned = await async_client.get("/cats/user", headers=auth_headers("u2"))
        assert [item["id"] for item in owned.json()] == [cat["id"]]

    @pytest.mark.asyncio
    async def test_reassign_to_unknown_owner(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")

        response = await async_client.put(
            f"/cats/admin/{cat['id']}", json={"owner_id": "ghost"}, headers=auth_headers("u3")
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == [{"field": "owner_id", "message": "owner does not exist"}]

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")

        put = await async_client.put(
            f"/cats/admin/{cat['id']}", json={"weight": 2.0}, headers=auth_headers("u1")
        )
        delete = await async_client.delete(f"/cats/admin/{cat['id']}", headers=auth_headers("u1"))

        assert put.status_code == status.HTTP_403_FORBIDDEN
        assert delete.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_admin_delete(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u2")

        first = await async_client.delete(f"/cats/admin/{cat['id']}", headers=auth_headers("u3"))
        second = await async_client.delete(f"/cats/admin/{cat['id']}", headers=auth_headers("u3"))

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_cats_survive_owner_deletion(self, async_client: AsyncClient) -> None:
        cat = await create_cat(async_client, "u1")

        await async_client.delete("/users", headers=auth_headers("u1"))
        response = await async_client.get(f"/cats/{cat['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["owner"]["email"] == "alice@example.com"
