from .cats import CatRepository
from .users import UserRepository

__all__ = ["CatRepository", "UserRepository"]
