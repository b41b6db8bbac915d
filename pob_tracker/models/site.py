"""Site model."""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import validates

from pob_tracker.database import Base
from pob_tracker.errors import ValidationFailed
from pob_tracker.models.mixins import TimestampMixin


class Site(Base, TimestampMixin):
    """A location whose persons-on-board count is tracked."""

    __tablename__ = "sites"
    __table_args__ = (
        CheckConstraint("current_pob >= 0", name="ck_sites_current_pob_non_negative"),
        CheckConstraint("maximum_pob > 0", name="ck_sites_maximum_pob_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # Natural lookup key, intentionally not unique at the schema level
    site_name = Column(String(100), nullable=False, index=True)
    current_pob = Column(Integer, nullable=False, default=0)
    maximum_pob = Column(Integer, nullable=False)
    pob_updated_date = Column(DateTime(timezone=True), nullable=False)

    @validates("current_pob")
    def validate_current_pob(self, key: str, value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationFailed("current_pob must be a non-negative integer")
        return value

    @validates("maximum_pob")
    def validate_maximum_pob(self, key: str, value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationFailed("maximum_pob must be a positive integer")
        return value
