"""Passenger service: lookups and the cascading delete."""

import logging

from sqlalchemy.orm import Session

from pob_tracker.errors import NotFound
from pob_tracker.models.passenger import Passenger
from pob_tracker.models.trip import Trip

logger = logging.getLogger(__name__)


class PassengerService:
    """Service for passenger-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, passenger_id: int) -> Passenger:
        passenger = self.db.query(Passenger).filter(Passenger.id == passenger_id).first()
        if passenger is None:
            raise NotFound("Passenger not found")
        return passenger

    def delete_with_trips(self, passenger_id: int) -> int:
        """Delete a passenger and every trip referencing it in one transaction.

        Returns the number of trips removed. On any failure, including the
        passenger not existing, the transaction is rolled back and nothing is
        deleted.
        """
        try:
            passenger = (
                self.db.query(Passenger)
                .filter(Passenger.id == passenger_id)
                .with_for_update()
                .first()
            )
            if passenger is None:
                raise NotFound("Passenger not found")

            deleted_trips = (
                self.db.query(Trip)
                .filter(Trip.passenger_id == str(passenger_id))
                .delete(synchronize_session=False)
            )
            logger.info(f"Deleted {deleted_trips} trips for passenger {passenger_id}")

            self.db.delete(passenger)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return deleted_trips
