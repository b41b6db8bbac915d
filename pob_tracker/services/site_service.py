"""Site service: occupancy upserts and seeding of known sites."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from pob_tracker.errors import NotFound, ValidationFailed
from pob_tracker.models.site import Site

logger = logging.getLogger(__name__)

KNOWN_SITES = ["Ogle", "NTM", "NSC", "NDT", "NBD", "STC"]
DEFAULT_MAXIMUM_POB = 200


class SiteService:
    """Service for site-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, site_name: str) -> Site | None:
        # Names are not unique, so concurrent first writes can leave duplicates;
        # the oldest row is always the one read and updated
        return (
            self.db.query(Site)
            .filter(Site.site_name == site_name)
            .order_by(Site.id.asc())
            .first()
        )

    @staticmethod
    def clean_name(site_name: str) -> str:
        site_name = site_name.strip()
        if not site_name:
            raise ValidationFailed("Site name is required")
        return site_name

    def list_all(self) -> list[Site]:
        return self.db.query(Site).order_by(Site.site_name).all()

    def get_by_name(self, site_name: str) -> Site:
        site_name = self.clean_name(site_name)
        site = self._find(site_name)
        if site is None:
            raise NotFound(f"Site '{site_name}' not found")
        return site

    def upsert_pob(self, site_name: str, current_pob: int, maximum_pob: int | None = None) -> Site:
        """Set a site's occupancy, inserting the site if it does not exist yet."""
        site_name = self.clean_name(site_name)
        now = datetime.now(UTC)

        update_values = {"current_pob": current_pob, "pob_updated_date": now}
        if maximum_pob is not None:
            update_values["maximum_pob"] = maximum_pob

        insert_values = {
            "site_name": site_name,
            "current_pob": current_pob,
            "maximum_pob": maximum_pob if maximum_pob is not None else DEFAULT_MAXIMUM_POB,
            "pob_updated_date": now,
        }

        site = self._find(site_name)
        if site is None:
            site = Site(**insert_values)
            self.db.add(site)
        else:
            for field, value in update_values.items():
                setattr(site, field, value)

        self.db.commit()
        self.db.refresh(site)
        return site

    def update(
        self, site_name: str, current_pob: int | None = None, maximum_pob: int | None = None
    ) -> Site:
        """Update an existing site. The POB timestamp moves only with current_pob."""
        site = self.get_by_name(site_name)

        if maximum_pob is not None:
            site.maximum_pob = maximum_pob
        if current_pob is not None:
            site.current_pob = current_pob
            site.pob_updated_date = datetime.now(UTC)

        self.db.commit()
        self.db.refresh(site)
        return site

    def initialize(self) -> tuple[int, int]:
        """Insert any missing known site with zero occupancy.

        Existing sites are left untouched, so running this again is a no-op.
        Returns (created, existing).
        """
        now = datetime.now(UTC)
        created = existing = 0
        for site_name in KNOWN_SITES:
            if self._find(site_name) is not None:
                existing += 1
                continue
            self.db.add(
                Site(
                    site_name=site_name,
                    current_pob=0,
                    maximum_pob=DEFAULT_MAXIMUM_POB,
                    pob_updated_date=now,
                )
            )
            created += 1

        self.db.commit()
        logger.info(f"Initialized sites: {created} created, {existing} existing")
        return created, existing
