from . import models  # noqa: F401
from .base import Base
from .session import Database

__all__ = ["Base", "Database"]
