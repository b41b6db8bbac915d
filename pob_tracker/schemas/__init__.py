"""Pydantic schemas for API requests and responses."""

from pob_tracker.schemas.passenger import (
    PassengerBodyUpdate,
    PassengerCreate,
    PassengerResponse,
    PassengerUpdate,
)
from pob_tracker.schemas.site import SiteInitializeResponse, SitePobUpdate, SiteResponse, SiteUpdate
from pob_tracker.schemas.trip import (
    PassengerCountSet,
    TripConfirm,
    TripCreate,
    TripResponse,
    TripUpdate,
)
from pob_tracker.schemas.user import (
    AdminUserUpdate,
    AuthResponse,
    ProfileUpdate,
    UserLogin,
    UserRegister,
    UserResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "ProfileUpdate",
    "AdminUserUpdate",
    "AuthResponse",
    "UserResponse",
    "PassengerCreate",
    "PassengerUpdate",
    "PassengerBodyUpdate",
    "PassengerResponse",
    "TripCreate",
    "TripUpdate",
    "TripConfirm",
    "PassengerCountSet",
    "TripResponse",
    "SitePobUpdate",
    "SiteUpdate",
    "SiteResponse",
    "SiteInitializeResponse",
]
