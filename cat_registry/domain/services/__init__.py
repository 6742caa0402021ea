"""Domain services."""

from cat_registry.domain.services.auth_service import AuthService
from cat_registry.domain.services.cats import CatService
from cat_registry.domain.services.users import UserService

__all__ = [
    "AuthService",
    "CatService",
    "UserService",
]
