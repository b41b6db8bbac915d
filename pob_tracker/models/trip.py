"""Trip model."""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, String
from sqlalchemy.orm import validates

from pob_tracker.database import Base
from pob_tracker.errors import ValidationFailed
from pob_tracker.models.mixins import TimestampMixin
from pob_tracker.services.trip_dates import normalize_trip_date


class Trip(Base, TimestampMixin):
    """A passenger movement from one site to another on a given day."""

    __tablename__ = "trips"
    __table_args__ = (
        CheckConstraint(
            "number_of_passengers IS NULL OR number_of_passengers >= 1",
            name="ck_trips_number_of_passengers_positive",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    # Plain reference to passengers.id; kept consistent only by the cascading delete
    passenger_id = Column(String(64), nullable=False, index=True)
    from_origin = Column(String(255), nullable=False)
    to_destination = Column(String(255), nullable=False)
    trip_date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    confirmed = Column(Boolean, nullable=False, default=False)
    number_of_passengers = Column(Integer, nullable=True)

    @validates("trip_date")
    def validate_trip_date(self, key: str, value) -> str:
        return normalize_trip_date(value)

    @validates("number_of_passengers")
    def validate_number_of_passengers(self, key: str, value: int | None) -> int | None:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValidationFailed("Number of passengers must be a positive integer or empty")
        return value
