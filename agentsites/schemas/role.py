"""Role hierarchy, assignment, and audit API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from agentsites.domain.enums import SiteRole


class RoleMetadataResponse(BaseModel):
    """One entry of GET /roles/hierarchy."""

    model_config = ConfigDict(from_attributes=True)

    role: str
    rank: int
    title: str
    description: str
    level: str
    permissions: list[str]


class AssignableRolesResponse(BaseModel):
    """Roles the caller may assign at a site."""

    site_id: str
    actor_rank: int
    roles: list[SiteRole]


class RoleAssignRequest(BaseModel):
    """Request body for POST /users/{user_id}/roles. Omit site_id for uber_admin."""

    role: SiteRole
    site_id: str | None = Field(default=None, min_length=1, max_length=64)


class RoleAssignmentResponse(BaseModel):
    """Role assignment response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role: str
    site_id: str | None
    created_by: str | None
    created_at: datetime


class RoleAuditEntryResponse(BaseModel):
    """Role audit entry response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    target_user_id: str
    action: str
    role: str
    site_id: str | None
    actor_id: str
    created_at: datetime


class SiteUserResponse(BaseModel):
    """User holding roles at a site."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    roles: list[str]


class MeResponse(BaseModel):
    """Response for GET /me."""

    id: str
    email: str | None
    is_uber_admin: bool
    roles: list[RoleAssignmentResponse]
