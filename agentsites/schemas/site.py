"""Agent site API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from agentsites.domain.enums import SiteStatus


class SiteCreateRequest(BaseModel):
    """Request body for POST /sites."""

    display_name: str = Field(..., min_length=1, max_length=255)
    site_slug: str = Field(
        ..., min_length=1, max_length=64, pattern=r"^[a-z0-9][a-z0-9-]*$"
    )
    owner_user_id: str | None = Field(default=None, min_length=1, max_length=64)
    seed_from_master: bool = False


class SiteStatusUpdate(BaseModel):
    """Request body for PATCH /sites/{site_id}/status."""

    status: SiteStatus


class SiteResponse(BaseModel):
    """Agent site response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: str
    site_slug: str
    is_master: bool
    status: str
    seed_status: str | None
    owner_user_id: str | None
    created_at: datetime
    updated_at: datetime


class SeedResponse(BaseModel):
    """Response for POST /sites/{site_id}/seed."""

    model_config = ConfigDict(from_attributes=True)

    site_id: str
    master_site_id: str
    counts: dict[str, int]
