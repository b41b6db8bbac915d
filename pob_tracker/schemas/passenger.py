"""Passenger schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pob_tracker.schemas.base import RequiredStr, TrimmedStr


class PassengerCreate(BaseModel):
    """Create a new passenger."""

    first_name: RequiredStr = Field(..., max_length=100)
    last_name: RequiredStr = Field(..., max_length=100)
    job_role: TrimmedStr | None = Field(None, max_length=255)


class PassengerUpdate(PassengerCreate):
    """Update a passenger. ``job_role`` is left untouched when omitted."""


class PassengerBodyUpdate(PassengerUpdate):
    """Update a passenger identified in the request body."""

    id: int


class PassengerResponse(BaseModel):
    """Passenger response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    job_role: str | None
    created_at: datetime
    updated_at: datetime


class PassengerDeleted(BaseModel):
    message: str
    passenger_id: int
    deleted_trips: int
