from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, field_validator


class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class CatCreate(BaseModel):
    cat_name: str = Field(..., min_length=1, max_length=128)
    weight: float = Field(..., gt=0)
    birthdate: date
    location: Location

    @field_validator("birthdate")
    @classmethod
    def birthdate_not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("birthdate cannot be in the future")
        return value


class CatUpdate(BaseModel):
    """Closed set of patchable fields; ``owner_id`` is only honoured for admins."""

    cat_name: str | None = Field(None, min_length=1, max_length=128)
    weight: float | None = Field(None, gt=0)
    birthdate: date | None = None
    location: Location | None = None
    owner_id: str | None = Field(None, description="Reassign owner (admin route only)")

    @field_validator("birthdate")
    @classmethod
    def birthdate_not_in_future(cls, value: date | None) -> date | None:
        if value is not None and value > date.today():
            raise ValueError("birthdate cannot be in the future")
        return value


class Owner(BaseModel):
    id: str
    user_name: str
    email: str


class CatRead(BaseModel):
    id: str
    cat_name: str
    weight: float
    filename: str
    birthdate: date
    location: Location
    owner: Owner


class CatMessageResponse(BaseModel):
    message: str
    data: CatRead


class DeletedRef(BaseModel):
    id: str


class CatDeletedResponse(BaseModel):
    message: str = "Cat deleted"
    data: DeletedRef
