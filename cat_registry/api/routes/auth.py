"""Authentication API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.api.deps import get_db_session
from cat_registry.api.schemas.users import LoginRequest, LoginResponse, UserRead
from cat_registry.domain.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    description="Exchange email and password for a bearer token.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> LoginResponse:
    service = AuthService(session)
    result = await service.login(email=payload.email, password=payload.password)

    return LoginResponse(
        token=result["token"],
        token_type=result["token_type"],
        expires_in=result["expires_in"],
        user=UserRead(**result["user"]),
    )
