"""Cat routes. ``/cats/{id}`` is the owner variant, ``/cats/admin/{id}`` the admin one."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.api.deps import get_actor, get_db_session, get_upload_store
from cat_registry.api.errors import input_error_from
from cat_registry.api.schemas.cats import (
    CatCreate,
    CatDeletedResponse,
    CatMessageResponse,
    CatRead,
    CatUpdate,
    DeletedRef,
)
from cat_registry.domain import Actor
from cat_registry.domain.geo import parse_bounding_box
from cat_registry.domain.policy import Scope
from cat_registry.domain.services import CatService
from cat_registry.infrastructure.storage import UploadStore

router = APIRouter(prefix="/cats", tags=["Cats"])


@router.get("", response_model=list[CatRead])
async def list_cats(session: AsyncSession = Depends(get_db_session)) -> list[CatRead]:  # noqa: B008
    return [CatRead(**cat) for cat in await CatService(session).list_cats()]


@router.get("/area", response_model=list[CatRead], summary="Cats inside a bounding box")
async def list_cats_in_area(
    top_right: str | None = Query(None, alias="topRight", description="'<lat>,<lng>'"),
    bottom_left: str | None = Query(None, alias="bottomLeft", description="'<lat>,<lng>'"),
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[CatRead]:
    """An inverted box (bottom-left above or right of top-right) returns an empty list."""
    area = parse_bounding_box(top_right, bottom_left)
    return [CatRead(**cat) for cat in await CatService(session).list_cats_in_area(area)]


@router.get("/user", response_model=list[CatRead], summary="Cats owned by the caller")
async def list_own_cats(
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[CatRead]:
    return [CatRead(**cat) for cat in await CatService(session).list_own_cats(actor)]


@router.get("/owner/{owner_id}", response_model=list[CatRead])
async def list_cats_by_owner(
    owner_id: str,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> list[CatRead]:
    return [CatRead(**cat) for cat in await CatService(session).list_cats_by_owner(owner_id)]


@router.get("/{cat_id}", response_model=CatRead)
async def get_cat(
    cat_id: str,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> CatRead:
    return CatRead(**await CatService(session).get_cat(cat_id))


@router.post("", response_model=CatMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_cat(
    cat_name: str = Form(..., min_length=1, max_length=128),
    weight: float = Form(..., gt=0),
    birthdate: date = Form(...),
    lat: float = Form(..., ge=-90, le=90),
    lng: float = Form(..., ge=-180, le=180),
    file: UploadFile | None = File(None),
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
    uploads: UploadStore = Depends(get_upload_store),  # noqa: B008
) -> CatMessageResponse:
    """Create a cat owned by the caller. Any owner field in the form is ignored."""
    try:
        payload = CatCreate(
            cat_name=cat_name,
            weight=weight,
            birthdate=birthdate,
            location={"lat": lat, "lng": lng},
        )
    except ValidationError as exc:
        raise input_error_from(exc) from exc

    cat = await CatService(session, uploads=uploads).create_cat(
        actor, payload.model_dump(), upload=file
    )
    return CatMessageResponse(message="Cat created", data=CatRead(**cat))


@router.put("/{cat_id}", response_model=CatMessageResponse)
async def update_cat(
    cat_id: str,
    payload: CatUpdate,
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> CatMessageResponse:
    cat = await CatService(session).update_cat(
        actor, cat_id, payload.model_dump(exclude_unset=True), scope=Scope.OWN
    )
    return CatMessageResponse(message="Cat updated", data=CatRead(**cat))


@router.delete("/{cat_id}", response_model=CatDeletedResponse)
async def delete_cat(
    cat_id: str,
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> CatDeletedResponse:
    deleted = await CatService(session).delete_cat(actor, cat_id, scope=Scope.OWN)
    return CatDeletedResponse(data=DeletedRef(**deleted))


@router.put("/admin/{cat_id}", response_model=CatMessageResponse)
async def update_cat_as_admin(
    cat_id: str,
    payload: CatUpdate,
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> CatMessageResponse:
    """Admin update; ``owner_id`` reassigns the cat."""
    cat = await CatService(session).update_cat(
        actor, cat_id, payload.model_dump(exclude_unset=True), scope=Scope.ANY
    )
    return CatMessageResponse(message="Cat updated", data=CatRead(**cat))


@router.delete("/admin/{cat_id}", response_model=CatDeletedResponse)
async def delete_cat_as_admin(
    cat_id: str,
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> CatDeletedResponse:
    deleted = await CatService(session).delete_cat(actor, cat_id, scope=Scope.ANY)
    return CatDeletedResponse(data=DeletedRef(**deleted))
