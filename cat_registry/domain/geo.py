from __future__ import annotations

from cat_registry.domain.errors import FieldError, InputValidationError
from cat_registry.domain.models import CoordinateRange, Coordinates


def bounding_box(top_right: Coordinates, bottom_left: Coordinates) -> CoordinateRange:
    """Translate two corners into an inclusive lat/lng range.

    Corners are taken as given. An inverted box yields an empty range rather
    than having its bounds swapped or wrapped around the antimeridian.
    """
    return CoordinateRange(
        lat_min=bottom_left.lat,
        lat_max=top_right.lat,
        lng_min=bottom_left.lng,
        lng_max=top_right.lng,
    )


def parse_corner(raw: str) -> Coordinates:
    """Parse a ``"<lat>,<lng>"`` query value."""
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != 2:
        raise ValueError("expected '<lat>,<lng>'")
    try:
        lat, lng = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ValueError("coordinates must be numbers") from exc
    if not -90 <= lat <= 90:
        raise ValueError("latitude must be between -90 and 90")
    if not -180 <= lng <= 180:
        raise ValueError("longitude must be between -180 and 180")
    return Coordinates(lat=lat, lng=lng)


def parse_bounding_box(top_right: str | None, bottom_left: str | None) -> CoordinateRange:
    """Parse both corners, reporting every malformed one at once."""
    corners: dict[str, Coordinates] = {}
    errors: list[FieldError] = []
    for field, raw in (("topRight", top_right), ("bottomLeft", bottom_left)):
        if not raw:
            errors.append(FieldError(field=field, message="field required"))
            continue
        try:
            corners[field] = parse_corner(raw)
        except ValueError as exc:
            errors.append(FieldError(field=field, message=str(exc)))

    if errors:
        raise InputValidationError(errors)
    return bounding_box(corners["topRight"], corners["bottomLeft"])
