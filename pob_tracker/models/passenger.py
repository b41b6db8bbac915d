"""Passenger model."""

from sqlalchemy import Column, Integer, String

from pob_tracker.database import Base
from pob_tracker.models.mixins import TimestampMixin


class Passenger(Base, TimestampMixin):
    """A person who can be booked on trips between sites."""

    __tablename__ = "passengers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    job_role = Column(String(255), nullable=True, default="")
