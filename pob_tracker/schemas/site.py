"""Site schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SitePobUpdate(BaseModel):
    """Set a site's current occupancy, creating the site if needed."""

    current_pob: int = Field(..., ge=0, strict=True)
    maximum_pob: int | None = Field(None, gt=0, strict=True)


class SiteUpdate(BaseModel):
    """Partially update an existing site."""

    current_pob: int | None = Field(None, ge=0, strict=True)
    maximum_pob: int | None = Field(None, gt=0, strict=True)

    @model_validator(mode="after")
    def require_a_field(self) -> "SiteUpdate":
        if self.current_pob is None and self.maximum_pob is None:
            raise ValueError("No valid fields to update")
        return self


class SiteResponse(BaseModel):
    """Site response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    site_name: str
    current_pob: int
    maximum_pob: int
    pob_updated_date: datetime
    created_at: datetime
    updated_at: datetime


class SiteInitializeResponse(BaseModel):
    """Result of seeding the known sites."""

    message: str
    created: int
    existing: int
    sites: list[SiteResponse]
