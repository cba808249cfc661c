"""Propagation API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from agentsites.domain.enums import PropagationEntityType


class PropagationCreateRequest(BaseModel):
    """Request body for POST /propagation (queue a master-site change)."""

    site_id: str = Field(..., min_length=1, max_length=64)
    entity_type: PropagationEntityType
    entity_id: str | None = Field(default=None, max_length=64)
    entity_data: dict[str, Any]
    notes: str | None = Field(default=None, max_length=2000)


class PropagationRecordResponse(BaseModel):
    """Propagation record response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    source_site_id: str
    source_site_name: str | None = None
    source_site_slug: str | None = None
    update_type: str
    entity_id: str | None
    entity_data: dict[str, Any]
    status: str
    created_by: str
    approved_by: str | None
    approved_at: datetime | None
    created_at: datetime
    pushed_at: datetime | None
    target_sites: list[str]
    failed_sites: list[str]
    notes: str | None
    retry_of_id: str | None
    restrict_site_ids: list[str] | None


class PropagateUpdatesRequest(BaseModel):
    """Request body for POST /propagate-updates."""

    model_config = ConfigDict(populate_by_name=True)

    update_id: str = Field(..., alias="updateId", min_length=1, max_length=64)


class FanoutResults(BaseModel):
    """Per-site outcome lists (branch-site display names)."""

    success: list[str]
    failed: list[str]
    total: int


class PushResponse(BaseModel):
    """Response for a push: always success=True once the record is marked pushed."""

    success: bool = True
    results: FanoutResults
    message: str
