"""Role hierarchy API: role metadata, assignable roles, and site users."""

from typing import Annotated

from fastapi import APIRouter, Depends

from agentsites.api.v1.dependencies import (
    get_current_actor,
    get_role_authorization_service,
)
from agentsites.application.dtos.actor import Actor
from agentsites.application.services import RoleAuthorizationService
from agentsites.domain import role_hierarchy
from agentsites.schemas.role import (
    AssignableRolesResponse,
    RoleMetadataResponse,
    SiteUserResponse,
)

router = APIRouter()


@router.get("/roles/hierarchy", response_model=list[RoleMetadataResponse])
async def get_role_hierarchy(
    _actor: Annotated[Actor, Depends(get_current_actor)],
):
    """All roles with rank, title, level and permissions, highest rank first."""
    return [
        RoleMetadataResponse(
            role=m.role,
            rank=m.rank,
            title=m.title,
            description=m.description,
            level=m.level,
            permissions=list(m.permissions),
        )
        for m in role_hierarchy.hierarchy()
    ]


@router.get("/sites/{site_id}/roles/assignable", response_model=AssignableRolesResponse)
async def get_assignable_roles(
    site_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    role_svc: Annotated[RoleAuthorizationService, Depends(get_role_authorization_service)],
):
    """Roles the caller may assign at site_id."""
    roles = await role_svc.assignable_roles_for(actor, site_id)
    rank = await role_svc.actor_rank_at_site(actor, site_id)
    return AssignableRolesResponse(site_id=site_id, actor_rank=rank, roles=roles)


@router.get("/sites/{site_id}/users", response_model=list[SiteUserResponse])
async def list_site_users(
    site_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    role_svc: Annotated[RoleAuthorizationService, Depends(get_role_authorization_service)],
):
    """Users holding roles at site_id (moderator or above at the site)."""
    users = await role_svc.list_site_users(actor, site_id)
    return [SiteUserResponse.model_validate(u) for u in users]
