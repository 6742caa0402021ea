from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Actor:
    """Represents an authenticated caller, as read from a bearer token."""

    user_id: str
    role: str = "user"
    email: str = ""
    user_name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(slots=True, frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(slots=True, frozen=True)
class CoordinateRange:
    """Inclusive latitude/longitude window used to filter cats by area."""

    lat_min: float
    lat_max: float
    lng_min: float
    lng_max: float

    @property
    def is_empty(self) -> bool:
        return self.lat_min > self.lat_max or self.lng_min > self.lng_max


@dataclass(slots=True, frozen=True)
class OwnerSnapshot:
    """Owner fields denormalized onto a cat for display."""

    id: str
    user_name: str
    email: str
