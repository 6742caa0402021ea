"""User routes. ``/users`` acts on the caller, ``/users/{id}`` is the admin variant."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.api.deps import get_actor, get_db_session
from cat_registry.api.schemas.users import (
    UserAdminUpdate,
    UserCreate,
    UserMessageResponse,
    UserRead,
    UserUpdate,
)
from cat_registry.domain import Actor
from cat_registry.domain.policy import Scope
from cat_registry.domain.services import AuthService, UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserRead])
async def list_users(session: AsyncSession = Depends(get_db_session)) -> list[UserRead]:  # noqa: B008
    users = await UserService(session).list_users()
    return [UserRead(**user) for user in users]


@router.post("", response_model=UserMessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> UserMessageResponse:
    """Register a new user; the account always starts with the ``user`` role."""
    user = await AuthService(session).register_user(
        user_name=payload.user_name,
        email=payload.email,
        password=payload.password,
    )
    return UserMessageResponse(message="User added", data=UserRead(**user))


@router.get("/token", response_model=UserRead, summary="Check token")
async def check_token(
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> UserRead:
    """Return the identity carried by the bearer token."""
    return UserRead(**await UserService(session).check_token(actor))


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: str,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> UserRead:
    return UserRead(**await UserService(session).get_user(user_id))


@router.put("", response_model=UserMessageResponse)
async def update_current_user(
    payload: UserUpdate,
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> UserMessageResponse:
    user = await UserService(session).update_user(
        actor, payload.model_dump(exclude_unset=True), scope=Scope.OWN
    )
    return UserMessageResponse(message="User updated", data=UserRead(**user))


@router.delete("", response_model=UserMessageResponse)
async def delete_current_user(
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> UserMessageResponse:
    user = await UserService(session).delete_user(actor, scope=Scope.OWN)
    return UserMessageResponse(message="User deleted", data=UserRead(**user))


@router.put("/{user_id}", response_model=UserMessageResponse)
async def update_user_as_admin(
    user_id: str,
    payload: UserAdminUpdate,
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> UserMessageResponse:
    user = await UserService(session).update_user(
        actor, payload.model_dump(exclude_unset=True), scope=Scope.ANY, user_id=user_id
    )
    return UserMessageResponse(message="User updated", data=UserRead(**user))


@router.delete("/{user_id}", response_model=UserMessageResponse)
async def delete_user_as_admin(
    user_id: str,
    actor: Actor | None = Depends(get_actor),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> UserMessageResponse:
    user = await UserService(session).delete_user(actor, scope=Scope.ANY, user_id=user_id)
    return UserMessageResponse(message="User deleted", data=UserRead(**user))
