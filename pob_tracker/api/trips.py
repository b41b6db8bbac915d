"""Trip API endpoints.

These routes are open: callers may identify themselves, which is only used
to attribute changes in the logs.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pob_tracker.api.dependencies import actor_name, get_optional_user
from pob_tracker.database import get_db
from pob_tracker.errors import NotFound
from pob_tracker.models.user import User
from pob_tracker.schemas.trip import (
    PassengerCountSet,
    TripConfirm,
    TripCreate,
    TripDeleted,
    TripResponse,
    TripUpdate,
)
from pob_tracker.services.trip_service import TripService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trips", tags=["trips"])


def get_trip_service(
    db: Annotated[Session, Depends(get_db)],
) -> TripService:
    """Get trip service with dependencies."""
    return TripService(db)


Service = Annotated[TripService, Depends(get_trip_service)]
Actor = Annotated[User | None, Depends(get_optional_user)]


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
def create_trip(trip_data: TripCreate, service: Service, actor: Actor):
    """Create a new trip."""
    trip = service.create(trip_data)
    logger.info(
        f"New trip created: {trip.id} for passenger {trip.passenger_id} "
        f"on date {trip.trip_date} by {actor_name(actor)}"
    )
    return trip


@router.get("", response_model=list[TripResponse])
def list_trips(service: Service):
    """Get all trips, most recent first."""
    trips = service.list_all()
    logger.info(f"Fetched {len(trips)} trips")
    return trips


@router.get("/passenger/{passenger_id}", response_model=list[TripResponse])
def list_passenger_trips(passenger_id: str, service: Service):
    """Get trips by passenger ID."""
    trips = service.list_for_passenger(passenger_id)
    if not trips:
        raise NotFound("No trips found for this passenger")
    return trips


@router.get("/date/{trip_date}", response_model=list[TripResponse])
def list_trips_on_date(trip_date: str, service: Service):
    """Get trips on a specific date. Any accepted date format may be used."""
    query_date, trips = service.list_for_date(trip_date)
    logger.info(f"Fetched {len(trips)} trips for date {query_date}")
    return trips


@router.get("/{trip_id}", response_model=TripResponse)
def get_trip(trip_id: int, service: Service):
    """Get trip by ID."""
    return service.get(trip_id)


@router.put("/{trip_id}", response_model=TripResponse)
def update_trip(trip_id: int, trip_data: TripUpdate, service: Service, actor: Actor):
    """Replace a trip."""
    trip = service.replace(trip_id, trip_data)
    logger.info(f"Trip updated: {trip.id} for date {trip.trip_date} by {actor_name(actor)}")
    return trip


@router.patch("/{trip_id}/confirm", response_model=TripResponse)
def confirm_trip(trip_id: int, confirm_data: TripConfirm, service: Service, actor: Actor):
    """Update trip confirmation status."""
    trip = service.set_confirmed(trip_id, confirm_data.confirmed)
    logger.info(f"Trip {trip.id} confirmation set to: {trip.confirmed} by {actor_name(actor)}")
    return trip


@router.delete("/{trip_id}", response_model=TripDeleted)
def delete_trip(trip_id: int, service: Service, actor: Actor):
    """Delete trip by ID."""
    service.delete(trip_id)
    logger.info(f"Trip deleted: {trip_id} by {actor_name(actor)}")
    return TripDeleted(message="Trip deleted successfully", trip_id=trip_id)


@router.patch("/{trip_id}/passengers/increment", response_model=TripResponse)
def increment_passengers(trip_id: int, service: Service, actor: Actor):
    """Increment number of passengers."""
    trip = service.increment_passengers(trip_id)
    logger.info(
        f"Incremented passengers for trip {trip.id}: {trip.number_of_passengers} "
        f"by {actor_name(actor)}"
    )
    return trip


@router.patch("/{trip_id}/passengers/decrement", response_model=TripResponse)
def decrement_passengers(trip_id: int, service: Service, actor: Actor):
    """Decrement number of passengers (minimum 1)."""
    trip = service.decrement_passengers(trip_id)
    logger.info(
        f"Decremented passengers for trip {trip.id}: {trip.number_of_passengers} "
        f"by {actor_name(actor)}"
    )
    return trip


@router.patch("/{trip_id}/passengers/set", response_model=TripResponse)
def set_passengers(
    trip_id: int, count_data: PassengerCountSet, service: Service, actor: Actor
):
    """Set a specific number of passengers."""
    trip = service.set_passengers(trip_id, count_data.number_of_passengers)
    logger.info(
        f"Set passengers for trip {trip.id} to: {trip.number_of_passengers} "
        f"by {actor_name(actor)}"
    )
    return trip
