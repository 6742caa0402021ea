"""Errors raised by the CRUD engine and mapped to HTTP responses by the API layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class FieldError:
    field: str
    message: str


class CrudError(Exception):
    """Base class for caller-visible domain failures."""


class InputValidationError(CrudError):
    """Raised when request input is malformed; carries every failed field."""

    def __init__(self, errors: list[FieldError], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> InputValidationError:
        return cls([FieldError(field=field, message=message)])


class UnauthenticatedError(CrudError):
    """Raised when an operation needs an identity and none was presented."""


class ForbiddenError(CrudError):
    """Raised when the actor's role does not allow the requested endpoint variant."""


class NotFoundError(CrudError):
    """Raised when nothing matches the scoped filter.

    Covers both a missing id and a resource owned by somebody else.
    """


class ConflictError(CrudError):
    """Raised when a write collides with a unique constraint."""


class StoreUnavailableError(CrudError):
    """Raised when the database fails; surfaced as a generic server error."""
