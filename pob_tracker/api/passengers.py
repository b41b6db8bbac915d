"""Passenger API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pob_tracker.api.dependencies import ADMIN_ONLY, AUTHENTICATED
from pob_tracker.database import get_db
from pob_tracker.models.passenger import Passenger
from pob_tracker.schemas.passenger import (
    PassengerBodyUpdate,
    PassengerCreate,
    PassengerDeleted,
    PassengerResponse,
    PassengerUpdate,
)
from pob_tracker.services.passenger_service import PassengerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/passengers", tags=["passengers"])


def get_passenger_service(
    db: Annotated[Session, Depends(get_db)],
) -> PassengerService:
    """Get passenger service with dependencies."""
    return PassengerService(db)


def apply_update(passenger: Passenger, passenger_data: PassengerUpdate) -> None:
    passenger.first_name = passenger_data.first_name
    passenger.last_name = passenger_data.last_name
    if "job_role" in passenger_data.model_fields_set:
        passenger.job_role = passenger_data.job_role or ""


@router.post(
    "",
    response_model=PassengerResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=ADMIN_ONLY,
)
def create_passenger(
    passenger_data: PassengerCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new passenger."""
    passenger = Passenger(
        first_name=passenger_data.first_name,
        last_name=passenger_data.last_name,
        job_role=passenger_data.job_role or "",
    )
    db.add(passenger)
    db.commit()
    db.refresh(passenger)

    logger.info(f"New passenger created: {passenger.first_name} {passenger.last_name}")
    return passenger


@router.get("", response_model=list[PassengerResponse], dependencies=AUTHENTICATED)
def list_passengers(
    db: Annotated[Session, Depends(get_db)],
):
    """Get all passengers, sorted alphabetically."""
    return db.query(Passenger).order_by(Passenger.first_name, Passenger.last_name).all()


@router.get("/{passenger_id}", response_model=PassengerResponse, dependencies=AUTHENTICATED)
def get_passenger(
    passenger_id: int,
    service: Annotated[PassengerService, Depends(get_passenger_service)],
):
    """Get passenger by ID."""
    return service.get(passenger_id)


@router.put("", response_model=PassengerResponse, dependencies=ADMIN_ONLY)
def update_passenger_from_body(
    passenger_data: PassengerBodyUpdate,
    service: Annotated[PassengerService, Depends(get_passenger_service)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update a passenger whose ID is given in the request body."""
    passenger = service.get(passenger_data.id)
    apply_update(passenger, passenger_data)
    db.commit()
    db.refresh(passenger)

    logger.info(f"Passenger updated: {passenger.first_name} {passenger.last_name}")
    return passenger


@router.put("/{passenger_id}", response_model=PassengerResponse, dependencies=ADMIN_ONLY)
def update_passenger(
    passenger_id: int,
    passenger_data: PassengerUpdate,
    service: Annotated[PassengerService, Depends(get_passenger_service)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update passenger by ID."""
    passenger = service.get(passenger_id)
    apply_update(passenger, passenger_data)
    db.commit()
    db.refresh(passenger)

    logger.info(f"Passenger updated: {passenger.first_name} {passenger.last_name}")
    return passenger


@router.delete("/{passenger_id}", response_model=PassengerDeleted, dependencies=ADMIN_ONLY)
def delete_passenger(
    passenger_id: int,
    service: Annotated[PassengerService, Depends(get_passenger_service)],
):
    """Delete a passenger and all of its trips."""
    deleted_trips = service.delete_with_trips(passenger_id)

    logger.info(f"Passenger {passenger_id} deleted with {deleted_trips} trips")
    return PassengerDeleted(
        message="Passenger and associated trips deleted successfully",
        passenger_id=passenger_id,
        deleted_trips=deleted_trips,
    )
