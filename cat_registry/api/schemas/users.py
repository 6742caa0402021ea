"""Pydantic schemas for user and login endpoints."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from cat_registry.core.auth import Role

# --- Request Schemas ---


class UserCreate(BaseModel):
    """Registration payload. A ``role`` sent here is ignored."""

    user_name: str = Field(..., min_length=3, max_length=128, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=5, max_length=128, description="Password (min 5 characters)")


class UserUpdate(BaseModel):
    user_name: str | None = Field(None, min_length=3, max_length=128)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=5, max_length=128)


class UserAdminUpdate(UserUpdate):
    role: Role | None = Field(None, description="New role (admin only)")


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


# --- Response Schemas ---


class UserRead(BaseModel):
    """Public user projection: no password hash, no role."""

    id: str
    user_name: str
    email: str


class UserMessageResponse(BaseModel):
    message: str
    data: UserRead


class LoginResponse(BaseModel):
    message: str = Field(default="Login successful")
    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Access token TTL in seconds")
    user: UserRead
