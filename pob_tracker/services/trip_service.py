"""Trip service: queries, updates and atomic passenger-count changes."""

import logging

from sqlalchemy import case
from sqlalchemy.orm import Session

from pob_tracker.errors import NotFound, ValidationFailed
from pob_tracker.models.trip import Trip
from pob_tracker.schemas.trip import TripCreate
from pob_tracker.services.trip_dates import normalize_trip_date

logger = logging.getLogger(__name__)

# A trip with no recorded count is taken to carry one passenger
ASSUMED_BASE_COUNT = 1


class TripService:
    """Service for trip-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, trip_id: int, refresh: bool = False) -> Trip:
        """Get a trip by id or raise NotFound."""
        query = self.db.query(Trip)
        if refresh:
            query = query.populate_existing()
        trip = query.filter(Trip.id == trip_id).first()
        if trip is None:
            raise NotFound("Trip not found")
        return trip

    def list_all(self) -> list[Trip]:
        """All trips, latest trip date first and newest first within a day."""
        return (
            self.db.query(Trip)
            .order_by(Trip.trip_date.desc(), Trip.created_at.desc(), Trip.id.desc())
            .all()
        )

    def list_for_passenger(self, passenger_id: str) -> list[Trip]:
        passenger_id = passenger_id.strip()
        if not passenger_id:
            raise ValidationFailed("Passenger ID is required")
        return (
            self.db.query(Trip)
            .filter(Trip.passenger_id == passenger_id)
            .order_by(Trip.trip_date.desc(), Trip.id.desc())
            .all()
        )

    def list_for_date(self, raw_date: str) -> tuple[str, list[Trip]]:
        """Trips on a day. The date is normalized before it is used as a filter."""
        trip_date = normalize_trip_date(raw_date)
        trips = (
            self.db.query(Trip)
            .filter(Trip.trip_date == trip_date)
            .order_by(Trip.created_at.asc(), Trip.id.asc())
            .all()
        )
        return trip_date, trips

    def create(self, data: TripCreate) -> Trip:
        trip = Trip(**data.model_dump())
        self.db.add(trip)
        self.db.commit()
        self.db.refresh(trip)
        return trip

    def replace(self, trip_id: int, data: TripCreate) -> Trip:
        """Overwrite every field of an existing trip."""
        trip = self.get(trip_id)
        for field, value in data.model_dump().items():
            setattr(trip, field, value)
        self.db.commit()
        self.db.refresh(trip)
        return trip

    def set_confirmed(self, trip_id: int, confirmed: bool) -> Trip:
        trip = self.get(trip_id)
        trip.confirmed = confirmed
        self.db.commit()
        self.db.refresh(trip)
        return trip

    def delete(self, trip_id: int) -> None:
        trip = self.get(trip_id)
        self.db.delete(trip)
        self.db.commit()

    def increment_passengers(self, trip_id: int) -> Trip:
        """Add one passenger in a single UPDATE.

        An absent count is read as the assumed base of one, so it becomes two.
        """
        count = Trip.number_of_passengers
        updated = (
            self.db.query(Trip)
            .filter(Trip.id == trip_id)
            .update(
                {count: case((count.is_(None), ASSUMED_BASE_COUNT + 1), else_=count + 1)},
                synchronize_session=False,
            )
        )
        if not updated:
            self.db.rollback()
            raise NotFound("Trip not found")
        self.db.commit()
        return self.get(trip_id, refresh=True)

    def decrement_passengers(self, trip_id: int) -> Trip:
        """Remove one passenger, never going below one.

        The floor is part of the UPDATE's WHERE clause, so concurrent
        decrements cannot race past it. An absent count cannot be decremented.
        """
        count = Trip.number_of_passengers
        updated = (
            self.db.query(Trip)
            .filter(Trip.id == trip_id, count > ASSUMED_BASE_COUNT)
            .update({count: count - 1}, synchronize_session=False)
        )
        if not updated:
            self.db.rollback()
            self.get(trip_id)
            raise ValidationFailed("Number of passengers cannot be less than 1")
        self.db.commit()
        return self.get(trip_id, refresh=True)

    def set_passengers(self, trip_id: int, number_of_passengers: int) -> Trip:
        trip = self.get(trip_id)
        trip.number_of_passengers = number_of_passengers
        self.db.commit()
        self.db.refresh(trip)
        return trip
