"""Bearer token issuing and validation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import jwt

from cat_registry.core.config import get_settings

REQUIRED_CLAIMS = ("sub", "role", "exp", "iss")


class TokenError(Exception):
    """Raised when a token cannot be issued, decoded or validated."""


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str) -> Role:
        try:
            return cls(value)
        except ValueError as exc:
            raise TokenError(f"Unsupported role: {value}") from exc


def create_access_token(
    subject: str,
    *,
    role: Role | str,
    email: str | None = None,
    user_name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token for ``subject``; ``email``/``user_name`` ride along as identity claims."""
    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)

    claims: dict[str, Any] = {
        "sub": subject,
        "role": Role.parse(role).value,
        "iss": settings.app_name,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    claims.update({key: value for key, value in (("email", email), ("user_name", user_name)) if value})

    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature, expiry and issuer, then return the claims."""
    settings = get_settings()

    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.app_name,
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.PyJWTError as exc:
        raise TokenError("Invalid token") from exc

    Role.parse(claims["role"])
    return claims
