"""Trip schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pob_tracker.errors import ValidationFailed
from pob_tracker.schemas.base import RequiredStr
from pob_tracker.services.trip_dates import normalize_trip_date


class TripCreate(BaseModel):
    """Create a trip. Also used for full replacement on update."""

    passenger_id: RequiredStr = Field(..., max_length=64)
    from_origin: RequiredStr = Field(..., max_length=255)
    to_destination: RequiredStr = Field(..., max_length=255)
    trip_date: str
    confirmed: bool
    number_of_passengers: int | None = Field(None, ge=1)

    @field_validator("trip_date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        try:
            return normalize_trip_date(value)
        except ValidationFailed as e:
            raise ValueError(e.message) from None


class TripUpdate(TripCreate):
    """Replace every field of a trip."""


class TripConfirm(BaseModel):
    confirmed: bool


class PassengerCountSet(BaseModel):
    number_of_passengers: int = Field(..., ge=1)


class TripResponse(BaseModel):
    """Trip response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    passenger_id: str
    from_origin: str
    to_destination: str
    trip_date: str
    confirmed: bool
    number_of_passengers: int | None
    created_at: datetime
    updated_at: datetime


class TripDeleted(BaseModel):
    message: str
    trip_id: int
