"""Credential store: password hashing, registration, login and token handling."""

from __future__ import annotations

import structlog
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from cat_registry.core.auth import TokenError, create_access_token, decode_access_token
from cat_registry.core.config import get_settings
from cat_registry.domain.errors import ConflictError, UnauthenticatedError
from cat_registry.domain.models import Actor
from cat_registry.domain.policy import ScopedFilter
from cat_registry.domain.shaping import public_user
from cat_registry.infrastructure.db.models import UserModel, UserRole
from cat_registry.infrastructure.repositories import UserRepository

logger = structlog.get_logger()

# bcrypt, cost 12
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


class UserExistsError(ConflictError):
    """Raised when attempting to register with existing email."""


class InvalidCredentialsError(UnauthenticatedError):
    """Raised when login credentials are invalid."""


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def issue_token(user: UserModel) -> str:
    return create_access_token(
        subject=user.id,
        role=user.role.value,
        email=user.email,
        user_name=user.user_name,
    )


def validate_token(token: str) -> Actor:
    """Resolve a bearer token into the actor it was issued to."""
    try:
        payload = decode_access_token(token)
    except TokenError as exc:
        raise UnauthenticatedError(str(exc)) from exc

    return Actor(
        user_id=payload["sub"],
        role=payload["role"],
        email=payload.get("email", ""),
        user_name=payload.get("user_name", ""),
    )


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.users = UserRepository(session)

    async def register_user(self, *, user_name: str, email: str, password: str) -> dict:
        """Create a regular user; the role is never taken from the request."""
        await logger.ainfo("register_attempt", email=email)

        record = {
            "user_name": user_name,
            "email": email.lower(),
            "hashed_password": hash_password(password),
            "role": UserRole.USER,
        }

        try:
            user_id = await self.users.insert(record)
        except ConflictError as exc:
            await logger.awarning("register_duplicate_email", email=email)
            raise UserExistsError(f"User with email {email} already exists") from exc

        user = await self.users.find_one(ScopedFilter(resource_id=user_id))
        await logger.ainfo("user_registered", user_id=user_id, email=email)
        return public_user(user)

    async def login(self, *, email: str, password: str) -> dict:
        """
        Authenticate user with email and password.

        Returns:
            dict with the bearer token and the redacted user
        """
        await logger.ainfo("login_attempt", email=email)

        user = await self.users.find_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            await logger.awarning("login_failed", email=email)
            raise InvalidCredentialsError("Invalid email or password")

        await logger.ainfo("login_success", user_id=user.id, email=email)
        return {
            "token": issue_token(user),
            "token_type": "bearer",
            "expires_in": get_settings().access_token_ttl_seconds,
            "user": public_user(user),
        }

    async def resolve_actor(self, token: str) -> Actor:
        """Validate ``token`` and rebuild the actor from the current user row.

        Role, name and email come from the database, so a deleted account or a
        changed role takes effect before the token expires.
        """
        claimed = validate_token(token)
        user = await self.users.find_one(ScopedFilter(resource_id=claimed.user_id))
        if user is None:
            await logger.awarning("token_for_missing_user", user_id=claimed.user_id)
            raise UnauthenticatedError("Account no longer exists")

        return Actor(
            user_id=user.id,
            role=user.role.value,
            email=user.email,
            user_name=user.user_name,
        )
