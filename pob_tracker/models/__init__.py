"""SQLAlchemy models."""

from pob_tracker.models.passenger import Passenger
from pob_tracker.models.site import Site
from pob_tracker.models.trip import Trip
from pob_tracker.models.user import User, UserToken

__all__ = [
    "User",
    "UserToken",
    "Passenger",
    "Trip",
    "Site",
]
