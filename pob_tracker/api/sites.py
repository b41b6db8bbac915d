"""Site occupancy (POB) API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pob_tracker.api.dependencies import actor_name, get_optional_user
from pob_tracker.database import get_db
from pob_tracker.models.user import User
from pob_tracker.schemas.site import (
    SiteInitializeResponse,
    SitePobUpdate,
    SiteResponse,
    SiteUpdate,
)
from pob_tracker.services.site_service import SiteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sites", tags=["sites"])


def get_site_service(
    db: Annotated[Session, Depends(get_db)],
) -> SiteService:
    """Get site service with dependencies."""
    return SiteService(db)


@router.get("", response_model=list[SiteResponse])
def list_sites(service: Annotated[SiteService, Depends(get_site_service)]):
    """Get all sites."""
    sites = service.list_all()
    logger.info(f"Fetched {len(sites)} sites")
    return sites


@router.post(
    "/initialize", response_model=SiteInitializeResponse, status_code=status.HTTP_201_CREATED
)
def initialize_sites(
    service: Annotated[SiteService, Depends(get_site_service)],
    actor: Annotated[User | None, Depends(get_optional_user)],
):
    """Create any missing known site with default values."""
    created, existing = service.initialize()
    logger.info(f"Sites initialized by {actor_name(actor)}")
    return SiteInitializeResponse(
        message="Sites initialized successfully",
        created=created,
        existing=existing,
        sites=service.list_all(),
    )


@router.get("/{site_name}", response_model=SiteResponse)
def get_site(
    site_name: str,
    service: Annotated[SiteService, Depends(get_site_service)],
):
    """Get a site by name."""
    return service.get_by_name(site_name)


@router.put("/{site_name}/pob", response_model=SiteResponse)
def update_site_pob(
    site_name: str,
    pob_data: SitePobUpdate,
    service: Annotated[SiteService, Depends(get_site_service)],
    actor: Annotated[User | None, Depends(get_optional_user)],
):
    """Set the current POB of a site, creating the site if it does not exist."""
    site = service.upsert_pob(site_name, pob_data.current_pob, pob_data.maximum_pob)
    logger.info(f"Updated POB for {site.site_name}: {site.current_pob} by {actor_name(actor)}")
    return site


@router.put("/{site_name}", response_model=SiteResponse)
def update_site(
    site_name: str,
    site_data: SiteUpdate,
    service: Annotated[SiteService, Depends(get_site_service)],
    actor: Annotated[User | None, Depends(get_optional_user)],
):
    """Update site details of an existing site."""
    site = service.update(site_name, site_data.current_pob, site_data.maximum_pob)
    logger.info(
        f"Updated site: {site.site_name} {site_data.model_dump(exclude_none=True)} "
        f"by {actor_name(actor)}"
    )
    return site
