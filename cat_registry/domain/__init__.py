from cat_registry.domain.errors import (
    ConflictError,
    CrudError,
    FieldError,
    ForbiddenError,
    InputValidationError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from cat_registry.domain.models import Actor, CoordinateRange, Coordinates, OwnerSnapshot

__all__ = [
    "Actor",
    "ConflictError",
    "CoordinateRange",
    "Coordinates",
    "CrudError",
    "FieldError",
    "ForbiddenError",
    "InputValidationError",
    "NotFoundError",
    "OwnerSnapshot",
    "StoreUnavailableError",
    "UnauthenticatedError",
]
